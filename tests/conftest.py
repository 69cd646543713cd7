"""Pytest configuration and fixtures for CabinetBox tests."""

import csv
import io
from collections.abc import AsyncGenerator
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from cabinetbox.main import app
from cabinetbox.models.cabinet_product import CabinetProduct
from cabinetbox.models.import_session import ImportSession
from cabinetbox.routers.import_router import get_create_record, limiter


# Columns of a WooCommerce product export, in export order
EXPORT_HEADERS = [
    "ID",
    "Type",
    "SKU",
    "Name",
    "Published",
    "Short description",
    "Weight (lbs)",
    "Sale price",
    "Regular price",
    "Categories",
    "Tags",
    "Images",
    "Meta: assembly_fee",
    "Meta: assembly_cost",
]


def make_row(**values: str) -> dict[str, str]:
    """Build an export row with every column present and empty by default."""
    row = {header: "" for header in EXPORT_HEADERS}
    row.update(values)
    return row


def make_csv(rows: list[dict[str, str]], headers: list[str] = EXPORT_HEADERS) -> bytes:
    """Render rows as CSV bytes the way WooCommerce exports them."""
    buf = io.StringIO()
    writer = csv.DictWriter(buf, fieldnames=headers, extrasaction="ignore")
    writer.writeheader()
    for row in rows:
        writer.writerow(row)
    return buf.getvalue().encode("utf-8")


def make_product(index: int, retail_price: float = 100.0, **fields) -> CabinetProduct:
    """Build a mapped product with distinct SKUs."""
    return CabinetProduct(
        primary_sku=f"W-{index}",
        secondary_sku=f"V-{index}",
        brand="Forevermark",
        door_style="Shaker",
        retail_price=retail_price,
        species="MDF",
        **fields,
    )


@pytest.fixture
def sample_rows() -> list[dict[str, str]]:
    """Three sellable cabinets and one row with no SKU."""
    return [
        make_row(
            SKU="AZ-W0930",
            Name="Forevermark Champagne Shaker Wall Cabinet 9W X 30H",
            Published="1",
            **{
                "Short description": "Width: 9 Height: 30 Depth: 12 Door: 1",
                "Regular price": "120.50",
                "Weight (lbs)": "18",
                "Categories": "Wall Cabinets",
                "Tags": "wall, single-door",
                "Images": "https://cdn.example.com/w0930.jpg, https://cdn.example.com/w0930-b.jpg",
                "Meta: assembly_fee": "25",
                "Meta: assembly_cost": "12.5",
            },
        ),
        make_row(
            SKU="AZ-B24",
            Name="Forevermark Ice White Shaker Base Cabinet 24W X 34H",
            Published="0",
            **{"Regular price": "310", "Weight (lbs)": "55", "Tags": "base, double-door"},
        ),
        make_row(
            SKU="",
            Name="Forevermark Sample Door",
            Published="1",
        ),
        make_row(
            SKU="AZ-VDB27",
            Name="Vanity Drawer Base",
            Published="1",
            **{"Sale price": "199.99"},
        ),
    ]


@pytest.fixture
def sample_csv(sample_rows) -> bytes:
    """CSV export bytes for sample_rows."""
    return make_csv(sample_rows)


@pytest.fixture
def create_record() -> AsyncMock:
    """Product service create operation that always succeeds."""
    return AsyncMock(side_effect=lambda product: {"id": product.primary_sku, "wSKU": product.primary_sku})


@pytest_asyncio.fixture(scope="function")
async def client(create_record, monkeypatch) -> AsyncGenerator[AsyncClient, None]:
    """Async test client against the app with the product service replaced."""
    app.state.import_session = ImportSession()
    app.dependency_overrides[get_create_record] = lambda: create_record
    monkeypatch.setattr(limiter, "enabled", False)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
