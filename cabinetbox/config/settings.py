"""Global settings instance for CabinetBox.

This module provides a unified settings object that combines:
- Configuration from config.toml
- Secrets from secrets.env
- Environment variable overrides

The settings object provides a flat interface over the structured configuration.
"""

import logging

from cabinetbox.config.loader import load_config, load_secrets
from cabinetbox.config.schema import (
    CabinetboxConfig,
    ImportConfig,
    MappingConfig,
    SecretsConfig,
)

logger = logging.getLogger(__name__)


class Settings:
    """Unified settings object combining config and secrets."""

    def __init__(
        self,
        config: CabinetboxConfig | None = None,
        secrets: SecretsConfig | None = None,
    ):
        """Initialize settings.

        Args:
            config: Optional CabinetboxConfig instance. If not provided, loads from file.
            secrets: Optional SecretsConfig instance. If not provided, loads from file.
        """
        self._config = config or load_config()
        self._secrets = secrets or load_secrets()

        if not self._secrets.product_service_api_key:
            logger.debug("No product service API key configured; requests are sent unauthenticated")

    @property
    def config(self) -> CabinetboxConfig:
        """Get the full configuration object."""
        return self._config

    @property
    def secrets(self) -> SecretsConfig:
        """Get the secrets configuration object."""
        return self._secrets

    # Application
    @property
    def app_name(self) -> str:
        return self._config.app_name

    @property
    def debug(self) -> bool:
        return self._config.server.debug

    # Server
    @property
    def host(self) -> str:
        return self._config.server.host

    @property
    def port(self) -> int:
        return self._config.server.port

    @property
    def cors_origins(self) -> list[str]:
        return self._config.server.cors_origins

    # Import
    @property
    def import_config(self) -> ImportConfig:
        return self._config.import_

    @property
    def batch_size(self) -> int:
        return self._config.import_.batch_size

    @property
    def preview_size(self) -> int:
        return self._config.import_.preview_size

    @property
    def max_upload_size_bytes(self) -> int:
        return self._config.import_.max_upload_bytes

    # Mapping
    @property
    def mapping(self) -> MappingConfig:
        return self._config.mapping

    # Product service
    @property
    def product_service_url(self) -> str:
        return self._config.product_service.endpoint_url

    @property
    def product_service_timeout(self) -> float:
        return self._config.product_service.timeout_seconds

    @property
    def product_service_api_key(self) -> str | None:
        return self._secrets.product_service_api_key


# Global settings instance - lazily initialized
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the global settings instance.

    The settings are loaded once and cached for subsequent calls.
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset the global settings instance.

    This is primarily useful for testing to reload configuration.
    """
    global _settings
    _settings = None


class _SettingsProxy:
    """Proxy object that lazily loads settings on first access."""

    def __getattr__(self, name: str):
        return getattr(get_settings(), name)

    def __repr__(self) -> str:
        return repr(get_settings())


settings = _SettingsProxy()
