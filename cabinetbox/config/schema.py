"""Pydantic models for CabinetBox configuration.

These models define the structure of config.toml and secrets.env files.
"""

from pydantic import BaseModel, Field


class ServerConfig(BaseModel):
    """Server configuration."""

    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False
    # CORS configuration - empty list means same-origin only
    cors_origins: list[str] = []


class ImportConfig(BaseModel):
    """Spreadsheet import configuration."""

    batch_size: int = Field(default=10, ge=1)
    preview_size: int = Field(default=10, ge=0)
    allowed_extensions: list[str] = Field(default_factory=lambda: ["csv", "xlsx"])
    # Tried in order; a file none of them can decode is rejected
    encodings: list[str] = Field(default_factory=lambda: ["utf-8-sig"])
    max_upload_mb: int = 10
    default_publish: bool | None = None
    default_discount: float | None = Field(default=None, ge=0, le=100)

    @property
    def max_upload_bytes(self) -> int:
        """Get max upload size in bytes."""
        return self.max_upload_mb * 1024 * 1024


class MappingConfig(BaseModel):
    """Fixed values used when mapping export rows to cabinet products."""

    sku_source_prefix: str = "AZ-"
    primary_sku_prefix: str = "W-"
    secondary_sku_prefix: str = "V-"
    default_brand: str = "Forevermark"
    default_door_style: str = "Shaker"
    default_species: str = "MDF"
    default_cost_factor: float = 1.0
    default_discount: float = 0.0
    publish_sentinel: str = "1"


class ProductServiceConfig(BaseModel):
    """Remote product service (GraphQL) configuration."""

    endpoint_url: str = "http://localhost:20002/graphql"
    timeout_seconds: float = 30.0


class CabinetboxConfig(BaseModel):
    """Main CabinetBox configuration loaded from config.toml."""

    app_name: str = "CabinetBox"
    server: ServerConfig = Field(default_factory=ServerConfig)
    import_: ImportConfig = Field(default_factory=ImportConfig, alias="import")
    mapping: MappingConfig = Field(default_factory=MappingConfig)
    product_service: ProductServiceConfig = Field(default_factory=ProductServiceConfig)

    model_config = {"populate_by_name": True}


class SecretsConfig(BaseModel):
    """Secrets loaded from secrets.env file.

    These are sensitive values that should not be stored in config.toml.
    """

    product_service_api_key: str | None = None
