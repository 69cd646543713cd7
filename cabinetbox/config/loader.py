"""Configuration loader for CabinetBox.

Loads configuration from TOML files and secrets from .env files.
Environment variables can override any configuration value.
"""

import logging
import os
import tomllib
from pathlib import Path
from typing import Any

from cabinetbox.config.schema import CabinetboxConfig, SecretsConfig

logger = logging.getLogger(__name__)

ENV_PREFIX = "CABINETBOX"

_INT_KEYS = {"port", "batch_size", "preview_size", "max_upload_mb"}
_FLOAT_KEYS = {"timeout_seconds", "default_discount", "default_cost_factor"}
_BOOL_KEYS = {"debug", "default_publish"}
_LIST_KEYS = {"cors_origins", "allowed_extensions", "encodings"}


def get_config_search_paths() -> list[Path]:
    """Get the list of paths to search for configuration files.

    Returns paths in priority order (first found wins):
    1. ./config.toml (project root - for development)
    2. ~/.config/cabinetbox/config.toml (user config)
    3. /etc/cabinetbox/config.toml (system config)
    """
    return [
        Path.cwd() / "config.toml",
        Path.home() / ".config" / "cabinetbox" / "config.toml",
        Path("/etc/cabinetbox/config.toml"),
    ]


def get_secrets_search_paths() -> list[Path]:
    """Get the list of paths to search for secrets files, in priority order."""
    return [
        Path.cwd() / "secrets.env",
        Path.home() / ".config" / "cabinetbox" / "secrets.env",
        Path("/etc/cabinetbox/secrets.env"),
    ]


def _first_existing(paths: list[Path]) -> Path | None:
    for path in paths:
        if path.exists() and path.is_file():
            logger.debug("Found file: %s", path)
            return path
    return None


def find_config_file() -> Path | None:
    """Find the first existing config file from search paths."""
    return _first_existing(get_config_search_paths())


def find_secrets_file() -> Path | None:
    """Find the first existing secrets file from search paths."""
    return _first_existing(get_secrets_search_paths())


def load_toml_file(path: Path) -> dict[str, Any]:
    """Load a TOML file and return its contents as a dictionary."""
    with open(path, "rb") as f:
        return tomllib.load(f)


def parse_env_file(path: Path) -> dict[str, str]:
    """Parse a simple .env file into a dictionary.

    Supports:
    - KEY=value
    - KEY="quoted value"
    - # comments
    - Empty lines
    """
    env_vars: dict[str, str] = {}

    with open(path) as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue

            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip()

            if (value.startswith('"') and value.endswith('"')) or (
                value.startswith("'") and value.endswith("'")
            ):
                value = value[1:-1]

            env_vars[key] = value

    return env_vars


def _convert_env_value(key: str, value: str) -> Any:
    """Convert an environment variable string to the type of its config key."""
    if key in _INT_KEYS:
        return int(value)
    if key in _FLOAT_KEYS:
        return float(value)
    if key in _BOOL_KEYS:
        return value.lower() in ("true", "1", "yes")
    if key in _LIST_KEYS:
        return [item.strip() for item in value.split(",") if item.strip()]
    return value


def apply_env_overrides(config_dict: dict[str, Any], prefix: str = ENV_PREFIX) -> None:
    """Apply environment variable overrides to configuration dictionary.

    Environment variables are mapped as follows:
    - CABINETBOX_SERVER_PORT -> config_dict["server"]["port"]
    - CABINETBOX_IMPORT_BATCH_SIZE -> config_dict["import"]["batch_size"]
    - CABINETBOX_PRODUCT_SERVICE_URL -> config_dict["product_service"]["endpoint_url"]
    - etc.

    Note: This modifies config_dict in place.
    """
    env_mappings = {
        # Server
        f"{prefix}_SERVER_HOST": ("server", "host"),
        f"{prefix}_SERVER_PORT": ("server", "port"),
        f"{prefix}_SERVER_DEBUG": ("server", "debug"),
        f"{prefix}_DEBUG": ("server", "debug"),  # Shorthand
        f"{prefix}_CORS_ORIGINS": ("server", "cors_origins"),
        # Import
        f"{prefix}_IMPORT_BATCH_SIZE": ("import", "batch_size"),
        f"{prefix}_IMPORT_PREVIEW_SIZE": ("import", "preview_size"),
        f"{prefix}_IMPORT_ALLOWED_EXTENSIONS": ("import", "allowed_extensions"),
        f"{prefix}_IMPORT_ENCODINGS": ("import", "encodings"),
        f"{prefix}_IMPORT_MAX_UPLOAD_MB": ("import", "max_upload_mb"),
        f"{prefix}_IMPORT_DEFAULT_PUBLISH": ("import", "default_publish"),
        f"{prefix}_IMPORT_DEFAULT_DISCOUNT": ("import", "default_discount"),
        # Mapping
        f"{prefix}_MAPPING_DEFAULT_BRAND": ("mapping", "default_brand"),
        f"{prefix}_MAPPING_DEFAULT_SPECIES": ("mapping", "default_species"),
        f"{prefix}_MAPPING_DEFAULT_COST_FACTOR": ("mapping", "default_cost_factor"),
        # Product service
        f"{prefix}_PRODUCT_SERVICE_ENDPOINT_URL": ("product_service", "endpoint_url"),
        f"{prefix}_PRODUCT_SERVICE_URL": ("product_service", "endpoint_url"),  # Shorthand
        f"{prefix}_PRODUCT_SERVICE_TIMEOUT_SECONDS": ("product_service", "timeout_seconds"),
    }

    for env_var, (section, key) in env_mappings.items():
        value = os.environ.get(env_var)
        if value is None:
            continue
        config_dict.setdefault(section, {})
        config_dict[section][key] = _convert_env_value(key, value)


def load_secrets(secrets_file: Path | None = None) -> SecretsConfig:
    """Load secrets from environment variables and optional secrets.env file.

    Environment variables take precedence over file values.
    """
    key_mapping = {
        f"{ENV_PREFIX}_PRODUCT_SERVICE_API_KEY": "product_service_api_key",
    }
    secrets_dict: dict[str, str | None] = {}

    if secrets_file is None:
        secrets_file = find_secrets_file()

    if secrets_file and secrets_file.exists():
        logger.info("Loading secrets from: %s", secrets_file)
        file_secrets = parse_env_file(secrets_file)
        for file_key, config_key in key_mapping.items():
            if file_key in file_secrets:
                secrets_dict[config_key] = file_secrets[file_key]

    for env_var, config_key in key_mapping.items():
        value = os.environ.get(env_var)
        if value:
            secrets_dict[config_key] = value

    return SecretsConfig(**secrets_dict)


def load_config(config_file: Path | None = None) -> CabinetboxConfig:
    """Load configuration from TOML file with environment variable overrides.

    Args:
        config_file: Optional path to config file. If not provided,
                     searches default locations.

    Returns:
        CabinetboxConfig instance with all settings loaded.
    """
    config_dict: dict[str, Any] = {}

    if config_file is None:
        config_file = find_config_file()

    if config_file and config_file.exists():
        logger.info("Loading config from: %s", config_file)
        config_dict = load_toml_file(config_file)
    else:
        logger.info("No config file found, using defaults with env overrides")

    apply_env_overrides(config_dict)

    return CabinetboxConfig(**config_dict)
