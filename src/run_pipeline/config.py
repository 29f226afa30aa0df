"""YAML configuration loader for the article pipeline."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from classify_articles.sections import SECTION_KEYS
from cluster_articles.cluster_articles import cluster_config_from_mapping
from cluster_articles.models import ClusterConfig
from common.errors import ConfigurationError
from merge_articles.store import StoreConfig

load_dotenv()

# Config directory at the repository root
CONFIG_DIR = Path(__file__).parent.parent.parent / "configs"
CONFIG_ENV_VAR = "PIPELINE_CONFIG"
DEFAULT_CONFIG_NAME = "prod"


@dataclass
class PipelineConfig:
    cluster: ClusterConfig = field(default_factory=ClusterConfig)
    cap_sections: bool = True
    section_limits: dict[str, int] = field(default_factory=dict)  # overrides on the defaults
    store: StoreConfig = field(default_factory=StoreConfig)

    def __post_init__(self) -> None:
        if not isinstance(self.cap_sections, bool):
            raise ConfigurationError(f"cap_sections must be true or false, got {self.cap_sections!r}")

        for section, limit in self.section_limits.items():
            if section not in SECTION_KEYS:
                raise ConfigurationError(
                    f"Invalid section in section_limits: {section}. Must be one of {list(SECTION_KEYS)}"
                )
            if isinstance(limit, bool) or not isinstance(limit, int) or limit < 0:
                raise ConfigurationError(
                    f"Section limit for {section} must be a non-negative integer, got {limit!r}"
                )


def config_path_for(config_name: str | None = None, config_dir: Path = CONFIG_DIR) -> Path:
    """Resolve a config name to its YAML file.

    Args:
        config_name: Name of config file (without .yaml extension).
                    If None, uses PIPELINE_CONFIG env var or "prod".
        config_dir: Directory holding the config files.

    Raises:
        FileNotFoundError: If the config file does not exist.
    """
    if config_name is None:
        config_name = os.environ.get(CONFIG_ENV_VAR, DEFAULT_CONFIG_NAME)

    config_path = config_dir / f"{config_name}.yaml"
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")
    return config_path


def read_config_file(path: Path) -> dict[str, Any]:
    """Read a YAML config file. An empty file reads as no overrides.

    Raises:
        ConfigurationError: If the document is not a mapping.
    """
    with open(path) as f:
        data = yaml.safe_load(f)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping, got {type(data).__name__}")
    return data


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    value = data.get(name) or {}
    if not isinstance(value, dict):
        raise ConfigurationError(f"Config section '{name}' must be a mapping, got {value!r}")
    return value


def _parse_config(data: dict[str, Any]) -> PipelineConfig:
    """Parse config dictionary into PipelineConfig object."""
    store_data = _section(data, "store")
    defaults = StoreConfig()

    store = StoreConfig(
        backend=store_data.get("backend", defaults.backend),
        path=store_data.get("path", defaults.path),
        bucket=store_data.get("bucket") or os.environ.get("S3_BUCKET_NAME", ""),
        key=store_data.get("key", defaults.key),
    )

    return PipelineConfig(
        cluster=cluster_config_from_mapping(_section(data, "cluster")),
        cap_sections=data.get("cap_sections", True),
        section_limits=dict(_section(data, "section_limits")),
        store=store,
    )


def load_config(config_name: str | None = None) -> PipelineConfig:
    """Load configuration from YAML file.

    Raises:
        FileNotFoundError: If the config file does not exist.
        ConfigurationError: If a value is invalid.
    """
    return _parse_config(read_config_file(config_path_for(config_name)))


# Global config instance (loaded on first access)
_config: PipelineConfig | None = None


def get_config() -> PipelineConfig:
    """Get the current configuration (lazy-loaded)."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def set_config(config: PipelineConfig) -> None:
    """Set the global configuration (useful for testing)."""
    global _config
    _config = config


def reset_config() -> None:
    """Reset the global configuration (forces reload on next access)."""
    global _config
    _config = None
