"""Marketing dataset provider: HTTP fetch, local files and fallback data."""

import json
import logging
from pathlib import Path
from typing import Any

import requests
from pydantic import ValidationError

from ..config import FALLBACK_DATASET_PATH, DashboardSettings
from ..exceptions import DatasetFetchError, DatasetValidationError
from ..models.dataset import MarketingDataset

logger = logging.getLogger(__name__)


class MarketingDataProvider:
    """Loads and validates the nested marketing dataset.

    Usage:
        provider = MarketingDataProvider(load_settings())
        dataset = provider.fetch()

    When ``use_fallback`` is enabled, a failed fetch returns the bundled
    fallback dataset (flagged with ``is_fallback``) instead of raising.
    """

    def __init__(
        self,
        settings: DashboardSettings,
        session: requests.Session | None = None,
        fallback_path: Path = FALLBACK_DATASET_PATH,
    ):
        self.settings = settings
        self.session = session or requests.Session()
        self.fallback_path = fallback_path

    def fetch(self) -> MarketingDataset:
        """Fetch the dataset from the configured endpoint.

        Raises:
            DatasetFetchError: Endpoint unreachable, non-2xx, or not JSON
                (only when fallback is disabled).
            DatasetValidationError: Payload shape is invalid (only when
                fallback is disabled).
        """
        source = self.settings.data_source
        try:
            payload = self._get_json(source.url, source.timeout_seconds)
            return self.parse(payload, source=source.url)
        except (DatasetFetchError, DatasetValidationError) as e:
            if not source.use_fallback:
                raise
            logger.warning(f"Serving fallback marketing data: {e}")
            return self.load_fallback()

    def _get_json(self, url: str, timeout: float) -> Any:
        try:
            response = self.session.get(
                url,
                headers={"Content-Type": "application/json"},
                timeout=timeout,
            )
            response.raise_for_status()
            return response.json()
        except requests.RequestException as e:
            # JSON decode errors from requests also derive from RequestException
            raise DatasetFetchError(url, str(e)) from e

    def parse(self, payload: Any, source: str = "payload") -> MarketingDataset:
        """Validate a decoded JSON payload into a MarketingDataset."""
        try:
            return MarketingDataset.model_validate(payload)
        except ValidationError as e:
            raise DatasetValidationError(e.errors(), source) from e

    def load_file(self, path: Path) -> MarketingDataset:
        """Load a dataset from a local JSON file."""
        try:
            with open(path, "rb") as f:
                content = f.read()
        except OSError as e:
            raise DatasetFetchError(str(path), str(e)) from e
        return self.loads(content, source=str(path))

    def loads(self, content: str | bytes, source: str = "upload") -> MarketingDataset:
        """Decode and validate raw JSON text, e.g. an uploaded file."""
        try:
            payload = json.loads(content)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise DatasetFetchError(source, str(e)) from e
        return self.parse(payload, source=source)

    def load_fallback(self) -> MarketingDataset:
        """Return the fixed fallback dataset."""
        dataset = self.load_file(self.fallback_path)
        return dataset.model_copy(update={"is_fallback": True})
