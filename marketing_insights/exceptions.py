"""Custom exceptions for dataset loading and configuration."""

from typing import Any


class DashboardError(Exception):
    """Base exception for marketing dashboard errors."""

    pass


class ConfigLoadError(DashboardError):
    """Failed to load dashboard settings."""

    pass


class DatasetError(DashboardError):
    """Base exception for dataset provider errors."""

    pass


class DatasetFetchError(DatasetError):
    """Upstream marketing data endpoint could not be read."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to fetch marketing data from {url}: {reason}")


class DatasetValidationError(DatasetError):
    """Payload did not match the MarketingDataset model."""

    def __init__(self, errors: list[dict[str, Any]], source: str):
        self.errors = errors
        self.source = source
        super().__init__(
            f"Validation failed with {len(errors)} error(s) for {source}. "
            f"First error: {errors[0] if errors else 'N/A'}"
        )
