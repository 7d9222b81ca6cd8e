"""Unified YAML Configuration for Delphi Consensus.

Holds the defaults applied to newly created studies, the location of the
local data file and the logging level.

Configuration Priority: Environment Variables > YAML > Defaults

Example YAML configuration (delphi_consensus.yaml):

    delphi:
      consensus:
        rule: net_agreement
        iqr_threshold: 1.0
        net_agreement_threshold: 75
        likert_min: 1
        likert_max: 9
      storage:
        path: ${HOME}/.local/share/delphi-consensus/data.json
      logging:
        level: INFO
"""

import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Literal, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator, model_validator

from .consensus.types import ConsensusConfig, ConsensusRule

load_dotenv()


# =============================================================================
# Sub-configuration Models
# =============================================================================


class ConsensusDefaultsConfig(BaseModel):
    """Consensus settings applied to new studies."""

    rule: Literal["iqr", "net_agreement"] = "iqr"
    iqr_threshold: float = Field(default=1.0, ge=0)
    net_agreement_threshold: float = Field(default=75.0, ge=0, le=100)
    likert_min: int = 1
    likert_max: int = 9

    @field_validator("rule", mode="before")
    @classmethod
    def normalize_rule(cls, v: Any) -> Any:
        if isinstance(v, ConsensusRule):
            return v.value
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @model_validator(mode="after")
    def check_likert_bounds(self) -> "ConsensusDefaultsConfig":
        """Reject scales with likert_max <= likert_min."""
        if self.likert_max <= self.likert_min:
            raise ValueError(
                f"likert_max ({self.likert_max}) must exceed likert_min ({self.likert_min})"
            )
        return self

    def to_consensus_config(self) -> ConsensusConfig:
        return ConsensusConfig(
            rule=ConsensusRule.parse(self.rule),
            iqr_threshold=self.iqr_threshold,
            net_agreement_threshold=self.net_agreement_threshold,
            likert_min=self.likert_min,
            likert_max=self.likert_max,
        )


class StorageConfig(BaseModel):
    """Configuration for the local JSON data file."""

    path: str = Field(
        default_factory=lambda: str(
            Path.home() / ".local" / "share" / "delphi-consensus" / "data.json"
        )
    )
    autosave: bool = True


class LoggingConfig(BaseModel):
    """Configuration for the delphi_consensus logger."""

    level: str = Field(default="WARNING")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        level = v.upper()
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if level not in valid_levels:
            raise ValueError(f"invalid log level '{v}', must be one of {valid_levels}")
        return level


class UnifiedConfig(BaseModel):
    """Unified configuration for Delphi Consensus."""

    consensus: ConsensusDefaultsConfig = Field(default_factory=ConsensusDefaultsConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    def to_yaml(self) -> str:
        """Serialize configuration to YAML string."""
        config_dict = {"delphi": self.to_dict()}
        return yaml.dump(config_dict, default_flow_style=False, sort_keys=False)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


# =============================================================================
# Configuration Loading Functions
# =============================================================================


def _substitute_env_vars(value: Any) -> Any:
    """Recursively substitute environment variables in configuration values.

    Supports ${VAR_NAME} syntax.
    """
    if isinstance(value, str):
        pattern = r"\$\{([^}]+)\}"
        for var_name in re.findall(pattern, value):
            env_value = os.getenv(var_name, "")
            value = value.replace(f"${{{var_name}}}", env_value)
        return value
    elif isinstance(value, dict):
        return {k: _substitute_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [_substitute_env_vars(item) for item in value]
    return value


def load_config(
    config_path: Optional[Path] = None,
    strict: bool = False,
) -> UnifiedConfig:
    """Load configuration from YAML file.

    Args:
        config_path: Path to YAML configuration file. If None, uses defaults.
        strict: If True, raise ValueError on validation errors. If False,
                fall back to defaults on errors.

    Returns:
        UnifiedConfig object

    Raises:
        ValueError: If strict=True and configuration is invalid
    """
    if config_path is None or not config_path.exists():
        return UnifiedConfig()

    try:
        with open(config_path, "r") as f:
            raw_config = yaml.safe_load(f)

        if raw_config is None:
            return UnifiedConfig()

        raw_config = _substitute_env_vars(raw_config)
        return UnifiedConfig(**raw_config.get("delphi", {}))

    except yaml.YAMLError as e:
        if strict:
            raise ValueError(f"Invalid YAML: {e}")
        return UnifiedConfig()
    except Exception as e:
        if strict:
            raise ValueError(f"Configuration error: {e}")
        return UnifiedConfig()


def _find_config_file() -> Optional[Path]:
    """Find configuration file in standard locations.

    Search order:
    1. DELPHI_CONFIG environment variable
    2. ./delphi_consensus.yaml (current directory)
    3. ~/.config/delphi-consensus/delphi_consensus.yaml
    """
    env_path = os.getenv("DELPHI_CONFIG")
    if env_path:
        path = Path(env_path)
        if path.exists():
            return path

    cwd_path = Path.cwd() / "delphi_consensus.yaml"
    if cwd_path.exists():
        return cwd_path

    home_path = Path.home() / ".config" / "delphi-consensus" / "delphi_consensus.yaml"
    if home_path.exists():
        return home_path

    return None


def _apply_env_overrides(config: UnifiedConfig) -> UnifiedConfig:
    """Apply environment variable overrides to configuration.

    Environment variables take precedence over YAML configuration.
    """
    config_dict = config.to_dict()

    consensus_overrides = {
        "DELPHI_CONSENSUS_RULE": ("rule", str),
        "DELPHI_IQR_THRESHOLD": ("iqr_threshold", float),
        "DELPHI_NET_AGREEMENT_THRESHOLD": ("net_agreement_threshold", float),
        "DELPHI_LIKERT_MIN": ("likert_min", int),
        "DELPHI_LIKERT_MAX": ("likert_max", int),
    }
    for env_var, (key, cast) in consensus_overrides.items():
        value = os.getenv(env_var)
        if value:
            config_dict.setdefault("consensus", {})[key] = cast(value)

    data_path = os.getenv("DELPHI_DATA_PATH")
    if data_path:
        config_dict.setdefault("storage", {})["path"] = data_path

    autosave = os.getenv("DELPHI_AUTOSAVE")
    if autosave:
        config_dict.setdefault("storage", {})["autosave"] = autosave.lower() in ("true", "1", "yes")

    log_level = os.getenv("DELPHI_LOG_LEVEL")
    if log_level:
        config_dict.setdefault("logging", {})["level"] = log_level

    return UnifiedConfig(**config_dict)


def get_effective_config(config_path: Optional[Path] = None) -> UnifiedConfig:
    """Get the effective configuration with all overrides applied.

    Priority: Environment Variables > YAML > Defaults

    Args:
        config_path: Optional explicit path to configuration file.
                    If None, searches standard locations.
    """
    if config_path is None:
        config_path = _find_config_file()

    config = load_config(config_path)
    return _apply_env_overrides(config)


def configure_logging(config: Optional[UnifiedConfig] = None) -> None:
    """Apply the configured level to the delphi_consensus logger."""
    config = config or get_config()
    logging.getLogger("delphi_consensus").setLevel(config.logging.level)


# =============================================================================
# Global Configuration Instance
# =============================================================================

# Lazy-loaded global config instance
_global_config: Optional[UnifiedConfig] = None


def get_config() -> UnifiedConfig:
    """Get the global configuration instance.

    This function caches the configuration after first load.
    Use reload_config() to force a reload.
    """
    global _global_config
    if _global_config is None:
        _global_config = get_effective_config()
    return _global_config


def reload_config() -> UnifiedConfig:
    """Reload the global configuration from disk."""
    global _global_config
    _global_config = get_effective_config()
    return _global_config
