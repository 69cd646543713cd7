"""Client for the remote product service's create-product mutation."""

import logging
from typing import Any

import httpx

from cabinetbox.config import settings
from cabinetbox.exceptions import ProductServiceError
from cabinetbox.models.cabinet_product import CabinetProduct

logger = logging.getLogger(__name__)

CREATE_CABINET_PRODUCT_MUTATION = """
mutation CreateCabinetProduct($input: CreateCabinetProductInput!) {
  createCabinetProduct(input: $input) {
    id
    wSKU
    vSKU
    brand
    doorStyle
    retailPrice
    discountPrice
    publish
  }
}
""".strip()


class ProductServiceClient:
    """Async GraphQL client creating cabinet products one at a time.

    Use as an async context manager so the underlying connection pool is
    closed when the import finishes::

        async with ProductServiceClient.from_settings() as client:
            await client.create_cabinet_product(product)
    """

    def __init__(
        self,
        endpoint_url: str,
        api_key: str | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        headers = {"Content-Type": "application/json"}
        if api_key:
            headers["x-api-key"] = api_key
        self.endpoint_url = endpoint_url
        self._client = httpx.AsyncClient(timeout=timeout, headers=headers, transport=transport)

    @classmethod
    def from_settings(cls, transport: httpx.AsyncBaseTransport | None = None) -> "ProductServiceClient":
        """Build a client from the global settings."""
        return cls(
            endpoint_url=settings.product_service_url,
            api_key=settings.product_service_api_key,
            timeout=settings.product_service_timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "ProductServiceClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def create_cabinet_product(self, product: CabinetProduct) -> dict[str, Any]:
        """Create one product remotely.

        Args:
            product: The product to create, with import defaults applied.

        Returns:
            The created product as returned by the service.

        Raises:
            ProductServiceError: On transport errors, non-2xx responses,
                GraphQL errors, or an empty result.
        """
        payload = {
            "query": CREATE_CABINET_PRODUCT_MUTATION,
            "variables": {"input": product.to_input()},
        }

        try:
            response = await self._client.post(self.endpoint_url, json=payload)
        except httpx.HTTPError as e:
            raise ProductServiceError(f"Request to product service failed: {e}") from e

        if response.status_code >= 400:
            raise ProductServiceError(
                f"Product service returned HTTP {response.status_code}: {response.text[:200]}"
            )

        try:
            body = response.json()
        except ValueError as e:
            raise ProductServiceError("Product service returned invalid JSON") from e

        errors = body.get("errors")
        if errors:
            messages = "; ".join(
                str(err.get("message", err)) if isinstance(err, dict) else str(err) for err in errors
            )
            raise ProductServiceError(f"createCabinetProduct failed: {messages}")

        created = (body.get("data") or {}).get("createCabinetProduct")
        if created is None:
            raise ProductServiceError("createCabinetProduct returned no record")

        logger.debug("Created cabinet product %s", created.get("wSKU", product.primary_sku))
        return created

    async def __call__(self, product: CabinetProduct) -> dict[str, Any]:
        return await self.create_cabinet_product(product)
