"""
Core infrastructure for the quote acceptance engine.

This module provides:
- Config: Configuration management
- Logging: structlog setup
- Exceptions: Setup-time errors
"""

from .config import AcceptanceConfig, ConfigManager, RateConfig, get_config
from .exceptions import AcceptanceError, ConfigurationError
from .logging import configure_logging, get_logger

__all__ = [
    "AcceptanceConfig",
    "AcceptanceError",
    "ConfigManager",
    "ConfigurationError",
    "RateConfig",
    "configure_logging",
    "get_config",
    "get_logger",
]
