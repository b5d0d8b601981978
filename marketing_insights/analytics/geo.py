"""Static geocoding lookup for region names."""

import re
from dataclasses import dataclass
from typing import Mapping

from ..config import Coordinates

WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class GeoLookup:
    """Read-only name -> coordinates table.

    Resolution order: exact region name, region name with all whitespace
    removed, then country name.
    """

    table: Mapping[str, Coordinates]

    def resolve(self, region: str, country: str | None = None) -> Coordinates | None:
        if region in self.table:
            return self.table[region]

        compact = WHITESPACE.sub("", region)
        if compact in self.table:
            return self.table[compact]

        if country and country in self.table:
            return self.table[country]

        return None
