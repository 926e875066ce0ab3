"""Configuration loading: packaged ``config.yaml`` parsed into ``AnalyticsConfig``."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from workpulse.errors import ConfigurationError
from workpulse.models.config import AnalyticsConfig

DEFAULT_CONFIG_PATH = Path(__file__).parent / "config.yaml"


def load_config(path: Path | None = None, overrides: dict[str, Any] | None = None) -> AnalyticsConfig:
    """Load engine configuration from YAML.

    Args:
        path: YAML file (packaged defaults if None)
        overrides: Top-level keys replacing the file's values

    Returns:
        Validated AnalyticsConfig

    Raises:
        ConfigurationError: If the file is not a mapping or fails validation
    """
    path = path or DEFAULT_CONFIG_PATH
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping")
    if overrides:
        data.update(overrides)
    return parse_config(data, source=str(path))


def parse_config(data: dict[str, Any], source: str = "<dict>") -> AnalyticsConfig:
    """Validate a configuration mapping, re-raising problems as ConfigurationError."""
    try:
        return AnalyticsConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration in {source}: {e}") from e
