"""Tests for catalog repositories"""
from decimal import Decimal
from unittest.mock import AsyncMock, Mock

import pytest

from simcart.services.repositories import ComponentRepository, ProductRepository

PRODUCT_ID = "6f1c2d3e-4b5a-4c6d-8e7f-901234567890"


@pytest.fixture
def product_row():
    """Sample products row with embedded translations and images"""
    return {
        "id": PRODUCT_ID,
        "sku": "WB-01",
        "base_price": "199.90",
        "vat_rate": 21,
        "is_active": True,
        "product_translations": [
            {"locale": "en", "name": "Wheel Base"},
            {"locale": "es", "name": "Base de volante"},
        ],
        "product_images": [
            {"image_url": "https://cdn.test/2.jpg", "display_order": 2},
            {"image_url": "https://cdn.test/1.jpg", "display_order": 1},
        ],
    }


@pytest.mark.asyncio
async def test_get_product_by_id(mock_supabase_client, product_row):
    """Test getting product by ID"""
    table = mock_supabase_client.table.return_value
    table.execute = AsyncMock(return_value=Mock(data=[product_row]))

    product = await ProductRepository(mock_supabase_client).get_by_id(PRODUCT_ID, "es")

    assert product is not None
    assert product.id == PRODUCT_ID
    assert product.name == "Base de volante"
    assert product.image_url == "https://cdn.test/1.jpg"
    assert product.base_price == Decimal("199.90")
    assert product.vat_rate == Decimal("21")
    assert product.is_active is True
    mock_supabase_client.table.assert_called_with("products")
    table.eq.assert_called_with("id", PRODUCT_ID)


@pytest.mark.asyncio
async def test_get_product_falls_back_to_first_translation(mock_supabase_client, product_row):
    mock_supabase_client.table.return_value.execute = AsyncMock(return_value=Mock(data=[product_row]))

    product = await ProductRepository(mock_supabase_client).get_by_id(PRODUCT_ID, "fr")

    assert product.name == "Wheel Base"


@pytest.mark.asyncio
async def test_get_product_without_images(mock_supabase_client, product_row):
    product_row["product_images"] = []
    product_row["is_active"] = False
    mock_supabase_client.table.return_value.execute = AsyncMock(return_value=Mock(data=[product_row]))

    product = await ProductRepository(mock_supabase_client).get_by_id(PRODUCT_ID, "es")

    assert product.image_url is None
    assert product.is_active is False


@pytest.mark.asyncio
async def test_get_product_not_found(mock_supabase_client):
    """Test getting non-existent product"""
    product = await ProductRepository(mock_supabase_client).get_by_id(PRODUCT_ID, "es")

    assert product is None


@pytest.mark.asyncio
async def test_get_product_malformed_id(mock_supabase_client):
    """Ids that can't be catalog keys are absent without a query"""
    product = await ProductRepository(mock_supabase_client).get_by_id("not-a-uuid", "es")

    assert product is None
    mock_supabase_client.table.assert_not_called()


@pytest.mark.asyncio
async def test_sum_price_modifiers(mock_supabase_client):
    table = mock_supabase_client.table.return_value
    table.execute = AsyncMock(return_value=Mock(data=[
        {"price_modifier": "10.50"},
        {"price_modifier": 4.5},
    ]))

    total = await ComponentRepository(mock_supabase_client).sum_price_modifiers(PRODUCT_ID, ["c-1", "c-2"])

    assert total == Decimal("15.00")
    mock_supabase_client.table.assert_called_with("product_component_options")
    table.in_.assert_called_with("component_id", ["c-1", "c-2"])


@pytest.mark.asyncio
async def test_sum_price_modifiers_empty_selection(mock_supabase_client):
    total = await ComponentRepository(mock_supabase_client).sum_price_modifiers(PRODUCT_ID, [])

    assert total == Decimal("0")
    mock_supabase_client.table.assert_not_called()
