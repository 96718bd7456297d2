"""Cart engine: pricing, business rules and the login-time merge."""
import asyncio
from decimal import Decimal
from typing import Optional

from simcart.db import get_supabase, RedisKeys, TTL
from simcart.errors import (
    CartItemNotFoundError,
    InvalidQuantityError,
    ProductNotAvailableError,
    ProductNotFoundError,
    QuantityLimitExceededError,
)
from simcart.logging import get_logger, sanitize_id_for_logging, sanitize_cart_key_for_logging
from simcart.services.money import add
from simcart.services.repositories import ComponentRepository, ProductRepository
from .models import MAX_QUANTITY_PER_PRODUCT, AddToCart, CartLine, CartView, parse_options, serialize_options
from .storage import CartStore

logger = get_logger(__name__)

DEFAULT_LOCALE = "es"


def session_cart_key(session_id: str) -> str:
    return RedisKeys.session_cart_key(session_id)


def user_cart_key(user_id) -> str:
    return RedisKeys.user_cart_key(user_id)


def cart_ttl(cart_key: str) -> int:
    """TTL in seconds derived from the key shape (user vs session)."""
    return TTL.for_cart(cart_key)


def _validate_quantity(quantity, product_id: str) -> None:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        raise InvalidQuantityError(product_id=product_id)


class CartEngine:
    """
    Cart business logic on top of CartStore.

    Features:
    - Priced cart view joined with the product catalog on every read
    - 99-unit cap per product, checked on the resulting quantity
    - Customization price modifiers and selected options per product
    - Session -> user cart merge at login

    Holds no per-cart state; every call works off Redis.
    """

    def __init__(self, store: CartStore, product_catalog, component_catalog):
        self.store = store
        self.products = product_catalog
        self.components = component_catalog

    async def get_cart(self, cart_key: str, locale: str = DEFAULT_LOCALE) -> CartView:
        """Build the priced view of a cart. Bad lines are dropped, never raised."""
        quantities, modifiers, raw_options = await asyncio.gather(
            self.store.get_all_items(cart_key),
            self.store.get_all_price_modifiers(cart_key),
            self.store.get_all_selected_options(cart_key),
        )
        modifiers = modifiers or {}
        raw_options = raw_options or {}

        entries = [(product_id, quantity) for product_id, quantity in (quantities or {}).items() if quantity > 0]
        if not entries:
            return CartView()

        products = await asyncio.gather(
            *[self.products.get_by_id(product_id, locale) for product_id, _ in entries]
        )

        lines = []
        for (product_id, quantity), product in zip(entries, products):
            if product is None or not product.is_active:
                logger.warning(
                    "Cart build: product %s not found or inactive, skipping",
                    sanitize_id_for_logging(product_id),
                )
                continue

            selected_options = None
            raw = raw_options.get(product_id)
            if raw is not None:
                options, ok = parse_options(raw)
                if ok:
                    selected_options = options or None
                else:
                    logger.warning(
                        "Cart %s: malformed selected options for product %s, rendering without them",
                        sanitize_cart_key_for_logging(cart_key), sanitize_id_for_logging(product_id),
                    )

            lines.append(CartLine(
                product_id=product_id,
                sku=product.sku,
                name=product.name,
                image_url=product.image_url,
                quantity=quantity,
                unit_price=add(product.base_price, modifiers.get(product_id, Decimal("0"))),
                vat_rate=product.vat_rate,
                selected_options=selected_options,
            ))

        return CartView(items=lines)

    async def add_item(self, cart_key: str, request: AddToCart, locale: str = DEFAULT_LOCALE) -> CartView:
        """Add units of a product (additive). Creates the cart on first write."""
        product_id = str(request.product_id)

        product = await self.products.get_by_id(product_id, locale)
        if product is None:
            raise ProductNotFoundError(product_id=product_id)
        if not product.is_active:
            raise ProductNotAvailableError(product_id=product_id)

        _validate_quantity(request.quantity, product_id)

        current_quantity = await self.store.get_item(cart_key, product_id)
        if current_quantity + request.quantity > MAX_QUANTITY_PER_PRODUCT:
            raise QuantityLimitExceededError(MAX_QUANTITY_PER_PRODUCT, product_id=product_id)

        ttl = cart_ttl(cart_key)
        if current_quantity == 0 and await self.store.has_stale_item(cart_key, product_id):
            # Zero, negative or garbage left in the field: start over from the new amount
            await self.store.set_item(cart_key, product_id, request.quantity, ttl)
            new_quantity = request.quantity
        else:
            new_quantity = await self.store.increment_item(cart_key, product_id, request.quantity, ttl)
        if new_quantity > MAX_QUANTITY_PER_PRODUCT:
            # A concurrent add got in between the check and the increment
            reverted = await self.store.increment_item(cart_key, product_id, -request.quantity, ttl)
            if reverted <= 0:
                await self.store.remove_item(cart_key, product_id)
            raise QuantityLimitExceededError(MAX_QUANTITY_PER_PRODUCT, product_id=product_id)

        if request.selected_component_ids:
            modifier = await self.components.sum_price_modifiers(product_id, request.selected_component_ids)
            await self.store.set_price_modifier(cart_key, product_id, modifier, ttl)
            logger.info(
                "Cart %s: added %d of %s (total %d), price modifier %s",
                sanitize_cart_key_for_logging(cart_key), request.quantity,
                sanitize_id_for_logging(product_id), new_quantity, modifier,
            )
        else:
            logger.info(
                "Cart %s: added %d of %s (total %d), no customization",
                sanitize_cart_key_for_logging(cart_key), request.quantity,
                sanitize_id_for_logging(product_id), new_quantity,
            )

        if request.selected_options:
            await self.store.set_selected_options(
                cart_key, product_id, serialize_options(request.selected_options), ttl
            )

        await self.store.refresh_ttl(cart_key, ttl)
        return await self.get_cart(cart_key, locale)

    async def update_item(
        self,
        cart_key: str,
        product_id: str,
        quantity: int,
        locale: str = DEFAULT_LOCALE,
    ) -> CartView:
        """Set the absolute quantity of a product already in the cart."""
        product_id = str(product_id)
        _validate_quantity(quantity, product_id)
        if quantity > MAX_QUANTITY_PER_PRODUCT:
            raise QuantityLimitExceededError(MAX_QUANTITY_PER_PRODUCT, product_id=product_id)

        if await self.store.get_item(cart_key, product_id) <= 0:
            raise CartItemNotFoundError(product_id=product_id)

        ttl = cart_ttl(cart_key)
        await self.store.set_item(cart_key, product_id, quantity, ttl)
        await self.store.refresh_ttl(cart_key, ttl)

        logger.info(
            "Cart %s: updated product %s to qty %d",
            sanitize_cart_key_for_logging(cart_key), sanitize_id_for_logging(product_id), quantity,
        )
        return await self.get_cart(cart_key, locale)

    async def remove_item(self, cart_key: str, product_id: str) -> bool:
        """Remove a product with its modifier and options. Returns whether it was in the cart."""
        product_id = str(product_id)
        removed = await self.store.remove_item(cart_key, product_id)
        await self.store.remove_price_modifier(cart_key, product_id)
        await self.store.remove_selected_options(cart_key, product_id)

        logger.info(
            "Cart %s: removed product %s",
            sanitize_cart_key_for_logging(cart_key), sanitize_id_for_logging(product_id),
        )
        return removed

    async def clear_cart(self, cart_key: str) -> None:
        await self.store.delete_cart(cart_key)
        await self.store.delete_price_modifiers(cart_key)
        await self.store.delete_all_selected_options(cart_key)
        logger.info("Cart %s: cleared", sanitize_cart_key_for_logging(cart_key))

    async def merge_carts(self, source_key: str, dest_key: str, locale: str = DEFAULT_LOCALE) -> CartView:
        """
        Fold a session cart into a user cart at login.

        Quantities are summed. Modifiers and selected options from the source
        overwrite the destination's for the same product. The source cart is
        consumed.
        """
        await self.store.merge(source_key, dest_key, TTL.USER_CART)

        source_modifiers = await self.store.get_all_price_modifiers(source_key)
        for product_id, modifier in source_modifiers.items():
            await self.store.set_price_modifier(dest_key, product_id, modifier, TTL.USER_CART)
        await self.store.delete_price_modifiers(source_key)

        source_options = await self.store.get_all_selected_options(source_key)
        for product_id, options_json in source_options.items():
            await self.store.set_selected_options(dest_key, product_id, options_json, TTL.USER_CART)
        await self.store.delete_all_selected_options(source_key)

        logger.info(
            "Merged session cart %s into user cart %s",
            sanitize_cart_key_for_logging(source_key), sanitize_cart_key_for_logging(dest_key),
        )
        return await self.get_cart(dest_key, locale)


# Singleton instance
_cart_engine: Optional[CartEngine] = None


async def get_cart_engine() -> CartEngine:
    """Get CartEngine singleton wired to Redis and the Supabase catalog."""
    global _cart_engine
    if _cart_engine is None:
        client = await get_supabase()
        _cart_engine = CartEngine(
            store=CartStore(),
            product_catalog=ProductRepository(client),
            component_catalog=ComponentRepository(client),
        )
    return _cart_engine
