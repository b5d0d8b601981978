"""Dashboard settings loaded from YAML with environment overrides."""

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from ..exceptions import ConfigLoadError

CONFIG_DIR = Path(__file__).parent
DEFAULT_SETTINGS_PATH = CONFIG_DIR / "dashboard.yaml"
FALLBACK_DATASET_PATH = CONFIG_DIR / "fallback_dataset.json"

RGB = tuple[int, int, int]


class DataSourceSettings(BaseModel):
    url: str
    timeout_seconds: float = 8.0
    use_fallback: bool = True


class EncodingSettings(BaseModel):
    """Bubble map visual-encoding anchors."""

    min_radius: float = 4.0
    max_radius: float = 20.0
    low_color: RGB = (59, 130, 246)
    high_color: RGB = (239, 68, 68)
    zero_spend_color: str = "#60A5FA"


class Coordinates(BaseModel):
    lat: float
    lng: float


class DashboardSettings(BaseModel):
    data_source: DataSourceSettings
    encoding: EncodingSettings = Field(default_factory=EncodingSettings)
    coordinates: dict[str, Coordinates] = Field(default_factory=dict)


def _env_overrides() -> dict[str, Any]:
    """Collect data source overrides from the environment."""
    overrides: dict[str, Any] = {}
    if url := os.getenv("MARKETING_DATA_URL"):
        overrides["url"] = url
    if timeout := os.getenv("MARKETING_DATA_TIMEOUT"):
        overrides["timeout_seconds"] = timeout
    if use_fallback := os.getenv("MARKETING_DATA_USE_FALLBACK"):
        overrides["use_fallback"] = use_fallback.strip().lower() in ("1", "true", "yes")
    return overrides


def load_settings(path: Path | None = None) -> DashboardSettings:
    """Load dashboard settings from YAML, applying environment overrides.

    Args:
        path: Settings file. Defaults to the bundled dashboard.yaml.

    Raises:
        ConfigLoadError: If the file cannot be read or fails validation.
    """
    path = path or DEFAULT_SETTINGS_PATH
    load_dotenv()

    try:
        with open(path) as f:
            raw = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigLoadError(f"Failed to load settings from {path}: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigLoadError(f"Invalid settings in {path}: top level must be a mapping")

    data_source = raw.get("data_source")
    if not isinstance(data_source, dict):
        raise ConfigLoadError(f"Invalid settings in {path}: data_source must be a mapping")
    raw["data_source"] = {**data_source, **_env_overrides()}

    try:
        return DashboardSettings.model_validate(raw)
    except ValidationError as e:
        raise ConfigLoadError(f"Invalid settings in {path}: {e}") from e


__all__ = [
    "Coordinates",
    "DashboardSettings",
    "DataSourceSettings",
    "DEFAULT_SETTINGS_PATH",
    "EncodingSettings",
    "FALLBACK_DATASET_PATH",
    "load_settings",
]
