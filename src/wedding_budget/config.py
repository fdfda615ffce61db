"""
Configuration management for wedding-budget.

Centralised configuration with YAML loading and sensible defaults.
The config drives the CLI and API: allocation defaults, the
top-priority range, server settings and log level.  The allocation
engine itself never reads it; callers pass values in explicitly.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Any

import yaml
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from wedding_budget.core.contracts import DEFAULT_TIER_MULTIPLIERS, TierMultipliers
from wedding_budget.core.exceptions import ConfigError

CONFIG_ENV_VAR = "WEDDING_BUDGET_CONFIG"


# ---------------------------------------------------------------------------
# Section configs
# ---------------------------------------------------------------------------

class AllocationConfig(BaseModel):
    """Allocation engine defaults."""

    model_config = ConfigDict(allow_inf_nan=False)

    default_base_weight: float = Field(default=0.3, gt=0, le=1)
    tier_multipliers: TierMultipliers = Field(default=DEFAULT_TIER_MULTIPLIERS)
    scenario_multipliers: list[float] = Field(default_factory=lambda: [0.8, 0.9, 1.0, 1.1, 1.2])


class PriorityConfig(BaseModel):
    """Allowed number of TOP categories."""

    min_top: int = Field(default=3, ge=0)
    max_top: int = Field(default=5, ge=0)
    enforce: bool = Field(default=False, description="Refuse to allocate when the count is invalid")

    @model_validator(mode="after")
    def _check_range(self) -> "PriorityConfig":
        if self.min_top > self.max_top:
            raise ValueError("priorities.min_top must not exceed priorities.max_top")
        return self


class ServerConfig(BaseModel):
    """API server settings."""

    api_host: str = Field(default="127.0.0.1")
    api_port: int = Field(default=8000)
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])


class LoggingConfig(BaseModel):
    level: str = Field(default="INFO")


# ---------------------------------------------------------------------------
# Root config
# ---------------------------------------------------------------------------

class WeddingBudgetConfig(BaseModel):
    """Root configuration for wedding-budget."""

    project_name: str = Field(default="wedding-budget")
    environment: str = Field(default="development")

    allocation: AllocationConfig = Field(default_factory=AllocationConfig)
    priorities: PriorityConfig = Field(default_factory=PriorityConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_yaml(cls, path: Path | str) -> "WeddingBudgetConfig":
        """Load config from a YAML file."""
        path = Path(path)
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
            return cls(**data)
        except OSError as e:
            raise ConfigError(f"Cannot read config file: {e}", path=str(path)) from e
        except (yaml.YAMLError, ValidationError, TypeError) as e:
            raise ConfigError(f"Invalid config file {path}: {e}", path=str(path)) from e

    def to_yaml(self, path: Path | str) -> None:
        """Write config to a YAML file."""
        with open(Path(path), "w") as f:
            yaml.dump(self.model_dump(mode="json"), f, default_flow_style=False, sort_keys=False)

    def to_flat_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


# ---------------------------------------------------------------------------
# Global singleton
# ---------------------------------------------------------------------------

_config: WeddingBudgetConfig | None = None


def get_config() -> WeddingBudgetConfig:
    """Return the global config instance (creates default if needed)."""
    global _config
    if _config is None:
        _config = WeddingBudgetConfig()
    return _config


def set_config(config: WeddingBudgetConfig) -> None:
    """Override the global config instance."""
    global _config
    _config = config


def load_config(path: Path | str | None = None) -> WeddingBudgetConfig:
    """
    Load config from file, falling back to standard locations, the
    ``WEDDING_BUDGET_CONFIG`` environment variable, then defaults.
    """
    global _config

    if path is not None:
        _config = WeddingBudgetConfig.from_yaml(path)
    else:
        candidates = [Path("config.yaml"), Path("config/config.yaml")]
        env_path = os.environ.get(CONFIG_ENV_VAR)
        if env_path:
            candidates.append(Path(env_path))

        for candidate in candidates:
            if candidate.exists():
                _config = WeddingBudgetConfig.from_yaml(candidate)
                break
        else:
            _config = WeddingBudgetConfig()

    return _config


def configure_logging(level: str | None = None) -> None:
    """Send loguru output to stderr at ``level`` (config level by default)."""
    logger.remove()
    logger.add(sys.stderr, level=(level or get_config().logging.level).upper())
