"""CabinetBox configuration module.

This module provides TOML-based configuration with environment variable overrides.

Configuration is loaded from the following locations (in order of priority):
1. Environment variables (highest priority)
2. ./config.toml (project root - for development)
3. ~/.config/cabinetbox/config.toml (user config)
4. /etc/cabinetbox/config.toml (system config)

Secrets are loaded from secrets.env files in the same directories.
"""

from cabinetbox.config.schema import (
    CabinetboxConfig,
    ImportConfig,
    MappingConfig,
    ProductServiceConfig,
    SecretsConfig,
    ServerConfig,
)
from cabinetbox.config.settings import get_settings, reset_settings, settings

__all__ = [
    "CabinetboxConfig",
    "ImportConfig",
    "MappingConfig",
    "ProductServiceConfig",
    "SecretsConfig",
    "ServerConfig",
    "get_settings",
    "reset_settings",
    "settings",
]
