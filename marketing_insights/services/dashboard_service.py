"""Dashboard service - orchestrates dataset loading and aggregation."""

import logging
from pathlib import Path
from typing import Any

from ..analytics import DashboardEngine
from ..config import load_settings
from ..ingestion import MarketingDataProvider
from ..models.dashboard_pack import DashboardPack
from ..models.dataset import MarketingDataset

logger = logging.getLogger(__name__)


class DashboardService:
    """Service for building dashboard views from the marketing dataset.

    Orchestrates:
    1. Loading settings (YAML + environment)
    2. Fetching the dataset, or reading a local JSON file
    3. Running every aggregation
    4. Returning a consolidated DashboardPack

    Usage:
        service = DashboardService()
        dataset = service.load_dataset()
        pack = service.build_pack(dataset)
    """

    def __init__(
        self,
        settings_path: Path | None = None,
        provider: MarketingDataProvider | None = None,
    ):
        """Initialize service with dashboard settings.

        Args:
            settings_path: Path to dashboard.yaml. Defaults to bundled config.
            provider: Dataset provider override (defaults to one built from
                the settings).
        """
        self.settings = load_settings(settings_path)
        self.provider = provider or MarketingDataProvider(self.settings)

    def load_dataset(self, path: Path | None = None) -> MarketingDataset:
        """Load the dataset from a local file, or from the configured endpoint.

        Args:
            path: Local JSON file (optional)

        Returns:
            Validated MarketingDataset (possibly the fallback dataset)
        """
        if path is not None:
            return self.provider.load_file(path)

        dataset = self.provider.fetch()
        if dataset.is_fallback:
            logger.info("Dashboard is running on fallback marketing data")
        return dataset

    def load_upload(self, content: bytes, name: str = "upload") -> MarketingDataset:
        """Load a dataset from the raw bytes of an uploaded JSON file."""
        return self.provider.loads(content, source=name)

    def create_engine(self, dataset: MarketingDataset) -> DashboardEngine:
        return DashboardEngine(
            dataset=dataset,
            coordinates=self.settings.coordinates,
            encoding=self.settings.encoding,
        )

    def build_pack(self, dataset: MarketingDataset) -> DashboardPack:
        """Run all aggregations over the dataset."""
        pack = self.create_engine(dataset).get_dashboard_pack()
        if pack.unmapped_regions:
            logger.info(
                f"{len(pack.unmapped_regions)} region(s) missing from the geocoding table"
            )
        return pack

    def generate_summary_dict(self, pack: DashboardPack) -> dict[str, Any]:
        """Convert DashboardPack to a JSON-serializable dictionary.

        Args:
            pack: DashboardPack from build_pack()

        Returns:
            Dictionary with every view plus an executive summary
        """
        return {
            "summary": pack.get_executive_summary(),
            **pack.to_dict(),
        }
