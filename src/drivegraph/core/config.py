"""Configuration management with pydantic and YAML support."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field

from ..paths import FLOWS_DIR


class StorageConfig(BaseModel):
    """Where configuration graphs are persisted."""

    root: Path = Field(default=FLOWS_DIR)
    indent: int = Field(default=2, ge=0, le=8)


class LoggingConfig(BaseModel):
    """Structured logger settings."""

    level: Literal["DEBUG", "INFO", "WARN", "ERROR"] = "INFO"


class ChartConfig(BaseModel):
    """Velocity chart sampling."""

    n_samples: int = Field(default=50, ge=2, le=10000)


class DrivegraphConfig(BaseModel):
    """Root configuration object."""

    storage: StorageConfig = Field(default_factory=StorageConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    chart: ChartConfig = Field(default_factory=ChartConfig)


def load_config(path: str | Path) -> DrivegraphConfig:
    """Load configuration from YAML file.

    Args:
        path: Path to YAML config file.

    Returns:
        Parsed DrivegraphConfig object.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        data = yaml.safe_load(f)

    return DrivegraphConfig.model_validate(data or {})


def save_config(config: DrivegraphConfig, path: str | Path) -> None:
    """Save configuration to YAML file.

    Args:
        config: Configuration to save.
        path: Output path.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w") as f:
        yaml.safe_dump(config.model_dump(mode="json"), f, default_flow_style=False)


def default_config() -> DrivegraphConfig:
    """Return default configuration."""
    return DrivegraphConfig()


def merge_config(base: DrivegraphConfig, overrides: dict[str, Any]) -> DrivegraphConfig:
    """Merge overrides into base configuration.

    Args:
        base: Base configuration.
        overrides: Dictionary of override values.

    Returns:
        New configuration with overrides applied.
    """
    base_dict = base.model_dump()

    def deep_merge(d1: dict, d2: dict) -> dict:
        result = d1.copy()
        for k, v in d2.items():
            if k in result and isinstance(result[k], dict) and isinstance(v, dict):
                result[k] = deep_merge(result[k], v)
            else:
                result[k] = v
        return result

    merged = deep_merge(base_dict, overrides)
    return DrivegraphConfig.model_validate(merged)
