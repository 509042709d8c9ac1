"""
Configuration management for the quote acceptance engine.

Handles loading and accessing:
- Business configuration (config.yaml): acceptance thresholds and rate tables
- Environment variables (logging and config location)
"""

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.core.exceptions import ConfigurationError
from src.data.models.load import VehicleType


class AcceptanceConfig(BaseModel):
    """Thresholds and defaults used while evaluating quotes."""

    sole_bidder_threshold: float = Field(0.60, ge=0.0, le=1.0)
    competitive_threshold: float = Field(0.70, ge=0.0, le=1.0)
    default_grace_minutes: int = Field(10, ge=0)
    neutral_fleet_rating: float = Field(3.0, ge=0.0, le=5.0)
    simulated_fleet_prefix: str = "sim-"
    default_vehicle_type: VehicleType = VehicleType.RIGID_18T


class RateConfig(BaseModel):
    """Benchmark rate table used by the reference price recommender."""

    per_km: dict[VehicleType, float] = Field(
        default_factory=lambda: {
            VehicleType.SMALL_VAN: 0.8,
            VehicleType.MEDIUM_VAN: 1.0,
            VehicleType.LARGE_VAN: 1.2,
            VehicleType.LUTON: 1.4,
            VehicleType.RIGID_7_5T: 1.6,
            VehicleType.RIGID_18T: 2.0,
            VehicleType.RIGID_26T: 2.4,
            VehicleType.ARTICULATED: 3.0,
        }
    )
    fallback_per_km: float = 2.0
    adr_multiplier: float = 1.15
    competition_step: float = 0.05
    competition_floor: float = 0.7
    spread: float = 0.15


class EnvironmentSettings(BaseSettings):
    """Environment variables configuration."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")
    config_dir: Optional[Path] = Field(None, alias="CONFIG_DIR")


class ConfigManager:
    """
    Central configuration manager for the quote acceptance engine.

    Loads and provides access to:
    - Business configuration from config/config.yaml
    - Environment variables from .env
    """

    def __init__(self, config_dir: Optional[Path] = None) -> None:
        """
        Initialize the configuration manager.

        Args:
            config_dir: Optional path to config directory. Defaults to CONFIG_DIR,
                then to the project root's config/ directory.
        """
        if config_dir is None:
            env_dir = os.environ.get("CONFIG_DIR")
            if env_dir:
                config_dir = Path(env_dir)
            else:
                project_root = Path(__file__).parent.parent.parent
                config_dir = project_root / "config"

        self.config_dir = Path(config_dir)
        self._business_config: Optional[dict[str, Any]] = None
        self._env_settings: Optional[EnvironmentSettings] = None
        self._acceptance: Optional[AcceptanceConfig] = None
        self._rates: Optional[RateConfig] = None

    @property
    def business_config(self) -> dict[str, Any]:
        """Load and return business configuration from config.yaml."""
        if self._business_config is None:
            config_path = self.config_dir / "config.yaml"
            with open(config_path, "r") as f:
                self._business_config = yaml.safe_load(f) or {}
        return self._business_config

    @property
    def env(self) -> EnvironmentSettings:
        """Load and return environment settings."""
        if self._env_settings is None:
            self._env_settings = EnvironmentSettings()
        return self._env_settings

    def get_section(self, name: str) -> dict[str, Any]:
        """
        Get a raw section of the business configuration.

        Raises:
            KeyError: If the section is not present in config.yaml
        """
        if name not in self.business_config:
            raise KeyError(f"No configuration section found: {name}")
        return self.business_config[name] or {}

    def get_acceptance_config(self) -> AcceptanceConfig:
        """Get acceptance thresholds and defaults."""
        if self._acceptance is None:
            self._acceptance = self._validate("acceptance", AcceptanceConfig)
        return self._acceptance

    def get_rate_config(self) -> RateConfig:
        """Get the benchmark rate table."""
        if self._rates is None:
            self._rates = self._validate("rates", RateConfig)
        return self._rates

    def _validate(self, section: str, model: type[BaseModel]) -> Any:
        raw = self.business_config.get(section, {}) or {}
        try:
            return model(**raw)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid '{section}' configuration: {e}") from e


# Global config instance
_config_manager: Optional[ConfigManager] = None


def get_config() -> ConfigManager:
    """
    Get the global configuration manager instance.

    Returns:
        ConfigManager singleton instance
    """
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager
