"""Tests for the CabinetBox configuration system."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from cabinetbox.config.loader import (
    apply_env_overrides,
    find_config_file,
    get_config_search_paths,
    get_secrets_search_paths,
    load_config,
    load_secrets,
    load_toml_file,
    parse_env_file,
)
from cabinetbox.config.schema import (
    CabinetboxConfig,
    ImportConfig,
    MappingConfig,
    ProductServiceConfig,
    SecretsConfig,
    ServerConfig,
)
from cabinetbox.config.settings import Settings, get_settings, reset_settings


@pytest.fixture
def clean_env():
    """Environment with no CABINETBOX_* variables."""
    env = {k: v for k, v in os.environ.items() if not k.startswith("CABINETBOX_")}
    with patch.dict(os.environ, env, clear=True):
        yield


class TestSchemaDefaults:
    """Test default values in schema models."""

    def test_server_config_defaults(self):
        config = ServerConfig()
        assert config.host == "127.0.0.1"
        assert config.port == 8000
        assert config.debug is False
        assert config.cors_origins == []

    def test_import_config_defaults(self):
        config = ImportConfig()
        assert config.batch_size == 10
        assert config.preview_size == 10
        assert config.allowed_extensions == ["csv", "xlsx"]
        assert config.encodings == ["utf-8-sig"]
        assert config.max_upload_bytes == 10 * 1024 * 1024
        assert config.default_publish is None
        assert config.default_discount is None

    def test_mapping_config_defaults(self):
        config = MappingConfig()
        assert config.sku_source_prefix == "AZ-"
        assert config.primary_sku_prefix == "W-"
        assert config.secondary_sku_prefix == "V-"
        assert config.default_brand == "Forevermark"
        assert config.default_species == "MDF"
        assert config.default_cost_factor == 1.0

    def test_product_service_defaults(self):
        config = ProductServiceConfig()
        assert config.endpoint_url.endswith("/graphql")
        assert config.timeout_seconds == 30.0

    def test_secrets_default_to_none(self):
        assert SecretsConfig().product_service_api_key is None

    def test_batch_size_must_be_positive(self):
        with pytest.raises(ValidationError):
            ImportConfig(batch_size=0)

    def test_default_discount_range(self):
        with pytest.raises(ValidationError):
            ImportConfig(default_discount=101)
        assert ImportConfig(default_discount=100).default_discount == 100


class TestTomlLoading:
    """Loading config.toml."""

    def test_load_toml_file(self, tmp_path: Path):
        path = tmp_path / "config.toml"
        path.write_text('app_name = "Showroom"\n')
        assert load_toml_file(path) == {"app_name": "Showroom"}

    def test_load_config_from_file(self, tmp_path: Path, clean_env):
        path = tmp_path / "config.toml"
        path.write_text(
            """
app_name = "Showroom Import"

[server]
port = 9000

[import]
batch_size = 5
default_discount = 15.0

[mapping]
default_brand = "House Brand"

[product_service]
endpoint_url = "https://api.example.com/graphql"
"""
        )
        config = load_config(path)

        assert config.app_name == "Showroom Import"
        assert config.server.port == 9000
        assert config.import_.batch_size == 5
        assert config.import_.default_discount == 15.0
        assert config.mapping.default_brand == "House Brand"
        assert config.product_service.endpoint_url == "https://api.example.com/graphql"

    def test_load_config_missing_file_uses_defaults(self, tmp_path: Path, clean_env):
        config = load_config(tmp_path / "missing.toml")
        assert config == CabinetboxConfig()

    def test_search_paths(self):
        config_paths = get_config_search_paths()
        secrets_paths = get_secrets_search_paths()
        assert config_paths[0] == Path.cwd() / "config.toml"
        assert config_paths[-1] == Path("/etc/cabinetbox/config.toml")
        assert secrets_paths[0] == Path.cwd() / "secrets.env"

    def test_find_config_file_in_cwd(self, tmp_path: Path, monkeypatch):
        (tmp_path / "config.toml").write_text("")
        monkeypatch.chdir(tmp_path)
        assert find_config_file() == tmp_path / "config.toml"


class TestEnvOverrides:
    """Environment variables override file values."""

    def test_overrides_typed_values(self, clean_env):
        config_dict = {"import": {"batch_size": 5}}
        env = {
            "CABINETBOX_IMPORT_BATCH_SIZE": "20",
            "CABINETBOX_DEBUG": "true",
            "CABINETBOX_IMPORT_DEFAULT_DISCOUNT": "12.5",
            "CABINETBOX_IMPORT_ALLOWED_EXTENSIONS": "csv, xlsx",
            "CABINETBOX_PRODUCT_SERVICE_URL": "https://override.example.com/graphql",
        }
        with patch.dict(os.environ, env):
            apply_env_overrides(config_dict)

        assert config_dict["import"]["batch_size"] == 20
        assert config_dict["import"]["default_discount"] == 12.5
        assert config_dict["import"]["allowed_extensions"] == ["csv", "xlsx"]
        assert config_dict["server"]["debug"] is True
        assert config_dict["product_service"]["endpoint_url"] == "https://override.example.com/graphql"

    def test_env_beats_file(self, tmp_path: Path, clean_env):
        path = tmp_path / "config.toml"
        path.write_text("[server]\nport = 9000\n")
        with patch.dict(os.environ, {"CABINETBOX_SERVER_PORT": "9100"}):
            config = load_config(path)
        assert config.server.port == 9100


class TestSecrets:
    """Loading secrets.env."""

    def test_parse_env_file(self, tmp_path: Path):
        path = tmp_path / "secrets.env"
        path.write_text(
            '# Product service\nCABINETBOX_PRODUCT_SERVICE_API_KEY="abc123"\n\nOTHER=value\n'
        )
        assert parse_env_file(path) == {
            "CABINETBOX_PRODUCT_SERVICE_API_KEY": "abc123",
            "OTHER": "value",
        }

    def test_load_secrets_from_file(self, tmp_path: Path, clean_env):
        path = tmp_path / "secrets.env"
        path.write_text("CABINETBOX_PRODUCT_SERVICE_API_KEY=from-file\n")
        assert load_secrets(path).product_service_api_key == "from-file"

    def test_env_beats_secrets_file(self, tmp_path: Path, clean_env):
        path = tmp_path / "secrets.env"
        path.write_text("CABINETBOX_PRODUCT_SERVICE_API_KEY=from-file\n")
        with patch.dict(os.environ, {"CABINETBOX_PRODUCT_SERVICE_API_KEY": "from-env"}):
            assert load_secrets(path).product_service_api_key == "from-env"


class TestSettings:
    """The flat settings interface."""

    def test_settings_properties(self):
        config = CabinetboxConfig(**{"import": {"batch_size": 4, "preview_size": 3}})
        settings = Settings(config=config, secrets=SecretsConfig(product_service_api_key="k"))

        assert settings.batch_size == 4
        assert settings.preview_size == 3
        assert settings.import_config.batch_size == 4
        assert settings.mapping.default_brand == "Forevermark"
        assert settings.product_service_api_key == "k"
        assert settings.max_upload_size_bytes == 10 * 1024 * 1024

    def test_get_settings_is_cached(self):
        reset_settings()
        try:
            assert get_settings() is get_settings()
        finally:
            reset_settings()
