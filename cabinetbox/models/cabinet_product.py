"""CabinetProduct model: the canonical record produced from an export row."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class CabinetProduct(BaseModel):
    """Normalized cabinet product sent to the product service.

    Field aliases match the product service's camelCase input schema, so
    ``model_dump(by_alias=True)`` produces a ready-to-send payload.
    """

    model_config = ConfigDict(populate_by_name=True)

    primary_sku: str = Field(alias="wSKU")
    secondary_sku: str = Field(alias="vSKU")
    brand: str = ""
    door_style: str = Field(default="", alias="doorStyle")
    discount: float = 0.0
    cost_factor: float = Field(default=1.0, alias="costFactor")
    assembly_fee: float = Field(default=0.0, alias="assemblyFee")
    assembly_cost: float = Field(default=0.0, alias="assemblyCost")
    retail_price: float = Field(default=0.0, alias="retailPrice")
    # Always computed at import time from retail_price and the discount
    discount_price: float = Field(default=0.0, alias="discountPrice")
    height: float = 0.0
    width: float = 0.0
    weight: float = 0.0
    species: str = ""
    image_path: str = Field(default="", alias="imagePath")
    categories: str = ""
    tags: str = ""
    publish: bool = False

    # Set when the product title did not match the expected naming pattern
    # and brand/style came from defaults. Never sent to the product service.
    low_confidence: bool = Field(default=False, exclude=True)

    def to_input(self) -> dict[str, Any]:
        """Return the create-mutation input payload."""
        return self.model_dump(by_alias=True)
