"""Configuration loader with Pydantic validation and defaults.

This module loads config/config.yaml, validates all keys, and provides
a typed Settings object with sane defaults if keys are missing.
"""

import os
from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

CONFIG_ENV_VAR = "CASE_NETWORK_CONFIG"
ENV_PREFIX = "CASE_NETWORK_"


class SectionConfig(BaseSettings):
    """Base for config sections; env overrides use CASE_NETWORK_<SECTION>_<FIELD>."""

    model_config = SettingsConfigDict(env_prefix=ENV_PREFIX, extra="ignore")


class CombinerConfig(SectionConfig):
    """Entity combination and connection inference."""

    model_config = SettingsConfigDict(env_prefix=f"{ENV_PREFIX}COMBINER_")

    inferred_strength: int = 2              # Strength of connections inferred from events
    relationship_preview_chars: int = 30    # Event description prefix used in relationship text

    @field_validator("inferred_strength")
    @classmethod
    def validate_strength(cls, v: int) -> int:
        """Inferred connections must carry a positive weight."""
        if v < 1:
            raise ValueError("inferred_strength must be a positive integer")
        return v


class BuilderConfig(SectionConfig):
    """Graph construction parameters."""

    model_config = SettingsConfigDict(env_prefix=f"{ENV_PREFIX}BUILDER_")

    event_cap: int = 12             # Only the first N events become nodes
    violation_strength: int = 4
    event_strength: int = 3


class ClusteringConfig(SectionConfig):
    """Union-Find clustering thresholds."""

    model_config = SettingsConfigDict(env_prefix=f"{ENV_PREFIX}CLUSTERING_")

    min_cluster_size: int = 2
    min_connection_strength: int = 3


class CentralityConfig(SectionConfig):
    """Degree/betweenness blend configuration."""

    model_config = SettingsConfigDict(env_prefix=f"{ENV_PREFIX}CENTRALITY_")

    sample_size: int = 30           # First-N source nodes used for betweenness
    degree_weight: float = 0.4
    betweenness_weight: float = 0.6

    @field_validator("degree_weight", "betweenness_weight")
    @classmethod
    def validate_weight(cls, v: float) -> float:
        """Ensure blend weights are in [0.0, 1.0]."""
        if not 0.0 <= v <= 1.0:
            raise ValueError("centrality weights must be between 0.0 and 1.0")
        return v


class CommunitiesConfig(SectionConfig):
    """Label propagation configuration."""

    model_config = SettingsConfigDict(env_prefix=f"{ENV_PREFIX}COMMUNITIES_")

    max_iterations: int = 20
    seed: Optional[int] = None      # None = system randomness, results vary per call


class LimitsConfig(SectionConfig):
    """Hard ceilings applied before super-linear analyses run."""

    model_config = SettingsConfigDict(env_prefix=f"{ENV_PREFIX}LIMITS_")

    max_nodes: Optional[int] = 5000
    max_links: Optional[int] = 50000


class CacheConfig(SectionConfig):
    """Analysis memoization."""

    model_config = SettingsConfigDict(env_prefix=f"{ENV_PREFIX}CACHE_")

    enabled: bool = True
    max_entries: int = 128


class LoggingConfig(SectionConfig):
    """Logging sinks for entry points."""

    model_config = SettingsConfigDict(env_prefix=f"{ENV_PREFIX}LOGGING_")

    level: Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    file: Optional[str] = None      # e.g. "logs/case_network.log"
    rotation: str = "10 MB"
    retention: str = "7 days"


class Settings(BaseSettings):
    """Main settings class with all configuration sections."""

    model_config = SettingsConfigDict(env_prefix=ENV_PREFIX, extra="ignore")

    combiner: CombinerConfig = Field(default_factory=CombinerConfig)
    builder: BuilderConfig = Field(default_factory=BuilderConfig)
    clustering: ClusteringConfig = Field(default_factory=ClusteringConfig)
    centrality: CentralityConfig = Field(default_factory=CentralityConfig)
    communities: CommunitiesConfig = Field(default_factory=CommunitiesConfig)
    limits: LimitsConfig = Field(default_factory=LimitsConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_yaml(cls, config_path: str | Path) -> "Settings":
        """Load settings from a YAML file.

        CASE_NETWORK_<SECTION>_<FIELD> environment variables take precedence
        over values in the file.

        Args:
            config_path: Path to config.yaml file

        Returns:
            Settings instance with loaded configuration

        Raises:
            FileNotFoundError: If config file doesn't exist
            yaml.YAMLError: If YAML is invalid
            ValidationError: If configuration doesn't match schema
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with config_path.open("r", encoding="utf-8") as f:
            config_dict = yaml.safe_load(f) or {}

        merged = cls._merge_with_defaults(config_dict)
        return cls(**_deep_merge(merged, cls._env_overrides()))

    @classmethod
    def _merge_with_defaults(cls, config_dict: dict) -> dict:
        """Merge config dict with default settings.

        Args:
            config_dict: Dictionary loaded from YAML file

        Returns:
            Merged dictionary with defaults filled in
        """
        return _deep_merge(cls().model_dump(), config_dict)

    @classmethod
    def _env_overrides(cls) -> dict:
        """Section fields set from the environment, keyed by section name."""
        # Only env-sourced values count as explicitly set on a bare section
        defaults = cls()
        overrides = {}
        for name in cls.model_fields:
            values = getattr(defaults, name).model_dump(exclude_unset=True)
            if values:
                overrides[name] = values
        return overrides


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override into base."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def get_settings(config_path: str | Path | None = None) -> Settings:
    """Get settings instance, loading from config file or using defaults.

    Args:
        config_path: Optional path to config.yaml. If None, uses the path in
                     CASE_NETWORK_CONFIG, then config/config.yaml relative to
                     the project root, then falls back to defaults.

    Returns:
        Settings instance
    """
    if config_path is None:
        env_path = os.environ.get(CONFIG_ENV_VAR)
        if env_path:
            config_path = Path(env_path)
        else:
            project_root = Path(__file__).parent.parent
            config_path = project_root / "config" / "config.yaml"

    config_path = Path(config_path)
    if config_path.exists():
        return Settings.from_yaml(config_path)

    return Settings()
