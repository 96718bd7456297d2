"""Pytest configuration and fixtures"""
import os
from decimal import Decimal
from unittest.mock import Mock, AsyncMock

import pytest

# Set test environment variables
os.environ.setdefault("UPSTASH_REDIS_REST_URL", "https://test.upstash.io")
os.environ.setdefault("UPSTASH_REDIS_REST_TOKEN", "test_token")
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test_key")

from simcart.cart import CartEngine, CartStore  # noqa: E402
from simcart.services.models import Product  # noqa: E402


class FakeRedis:
    """In-memory stand-in for the async Upstash client (hash commands only)."""

    def __init__(self):
        self.hashes = {}
        self.ttls = {}

    async def hgetall(self, key):
        return dict(self.hashes.get(key, {}))

    async def hget(self, key, field):
        return self.hashes.get(key, {}).get(field)

    async def hset(self, key, field, value):
        fields = self.hashes.setdefault(key, {})
        created = field not in fields
        fields[field] = str(value)
        return int(created)

    async def hincrby(self, key, field, increment):
        fields = self.hashes.setdefault(key, {})
        value = int(fields.get(field, "0")) + int(increment)
        fields[field] = str(value)
        return value

    async def hdel(self, key, *fields):
        existing = self.hashes.get(key, {})
        removed = 0
        for field in fields:
            if field in existing:
                del existing[field]
                removed += 1
        if key in self.hashes and not existing:
            await self.delete(key)
        return removed

    async def expire(self, key, seconds):
        if key not in self.hashes:
            return False
        self.ttls[key] = seconds
        return True

    async def exists(self, *keys):
        return sum(1 for key in keys if key in self.hashes)

    async def delete(self, *keys):
        deleted = 0
        for key in keys:
            if self.hashes.pop(key, None) is not None:
                deleted += 1
            self.ttls.pop(key, None)
        return deleted


class FakeProductCatalog:
    """Product lookups served from a dict."""

    def __init__(self, products):
        self.products = {product.id: product for product in products}
        self.locales = []

    async def get_by_id(self, product_id, locale="es"):
        self.locales.append(locale)
        return self.products.get(product_id)


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def cart_store(fake_redis):
    return CartStore(redis=fake_redis)


@pytest.fixture
def sample_products():
    """Catalog: wheel base (21%), pedals (21%), manual (10%), retired rim (inactive)"""
    return [
        Product(id="prod-wheel", sku="WB-01", name="Direct Drive Wheel Base",
                image_url="https://cdn.test/wb.jpg", base_price="200", vat_rate="21"),
        Product(id="prod-pedals", sku="PD-02", name="Load Cell Pedals",
                base_price="100", vat_rate="21"),
        Product(id="prod-manual", sku="MN-03", name="Setup Manual",
                base_price="50", vat_rate="10"),
        Product(id="prod-retired", sku="RM-04", name="Retired Rim",
                base_price="80", vat_rate="21", is_active=False),
    ]


@pytest.fixture
def product_catalog(sample_products):
    return FakeProductCatalog(sample_products)


@pytest.fixture
def component_catalog():
    """Component catalog returning a +15 modifier for any selection"""
    catalog = Mock()
    catalog.sum_price_modifiers = AsyncMock(return_value=Decimal("15"))
    return catalog


@pytest.fixture
def cart_engine(cart_store, product_catalog, component_catalog):
    return CartEngine(cart_store, product_catalog, component_catalog)


@pytest.fixture
def mock_supabase_client():
    """Mock async Supabase client; every builder call returns the same table mock"""
    client = Mock()

    table_mock = Mock()
    table_mock.select.return_value = table_mock
    table_mock.eq.return_value = table_mock
    table_mock.in_.return_value = table_mock
    table_mock.limit.return_value = table_mock
    table_mock.execute = AsyncMock(return_value=Mock(data=[]))

    client.table.return_value = table_mock
    return client
