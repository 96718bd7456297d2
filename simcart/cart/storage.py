"""Redis access for carts.

CartStore is a thin async wrapper over the Upstash client. It knows the key
layout (see RedisKeys) and the field encodings, nothing about products or
prices. Client errors are not caught here: an unreachable Redis surfaces to
the caller unchanged.
"""
from decimal import Decimal
from typing import Dict, Optional

from simcart.db import get_redis, RedisKeys
from simcart.logging import get_logger, sanitize_id_for_logging, sanitize_cart_key_for_logging
from simcart.services.money import parse_decimal, format_decimal

logger = get_logger(__name__)


def _parse_quantity(value) -> Optional[int]:
    """Decimal-integer string -> int, None if unparsable."""
    if value is None:
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


class CartStore:
    """
    Per-field access to the three hashes of a cart.

    TTLs are in seconds. Writes refresh the TTL of the hash they touch;
    refresh_ttl covers all three at once.
    """

    def __init__(self, redis=None):
        self._redis = redis  # Lazy initialization

    @property
    def redis(self):
        """Get Redis client (lazy initialization)."""
        if self._redis is None:
            self._redis = get_redis()
        return self._redis

    # ==================== QUANTITIES ====================

    async def get_all_items(self, cart_key: str) -> Dict[str, int]:
        """All positive quantities; empty dict for a missing cart."""
        entries = await self.redis.hgetall(RedisKeys.items_key(cart_key)) or {}

        items: Dict[str, int] = {}
        for product_id, raw in entries.items():
            quantity = _parse_quantity(raw)
            if quantity is not None and quantity > 0:
                items[str(product_id)] = quantity
        return items

    async def get_item(self, cart_key: str, product_id: str) -> int:
        """Quantity of one product, 0 if absent."""
        raw = await self.redis.hget(RedisKeys.items_key(cart_key), product_id)
        quantity = _parse_quantity(raw)
        return quantity if quantity is not None and quantity > 0 else 0

    async def has_stale_item(self, cart_key: str, product_id: str) -> bool:
        """Whether the field exists but does not hold a positive integer."""
        raw = await self.redis.hget(RedisKeys.items_key(cart_key), product_id)
        if raw is None:
            return False
        quantity = _parse_quantity(raw)
        return quantity is None or quantity <= 0

    async def set_item(self, cart_key: str, product_id: str, quantity: int, ttl: int) -> None:
        key = RedisKeys.items_key(cart_key)
        await self.redis.hset(key, product_id, str(int(quantity)))
        await self.redis.expire(key, ttl)

        logger.debug(
            "Cart %s: set product %s = %s",
            sanitize_cart_key_for_logging(cart_key), sanitize_id_for_logging(product_id), quantity,
        )

    async def increment_item(self, cart_key: str, product_id: str, delta: int, ttl: int) -> int:
        """
        Atomically add delta to a product's quantity (HINCRBY).

        Returns:
            Quantity after the increment
        """
        key = RedisKeys.items_key(cart_key)
        new_quantity = int(await self.redis.hincrby(key, product_id, int(delta)))
        await self.redis.expire(key, ttl)

        logger.debug(
            "Cart %s: product %s %+d -> %s",
            sanitize_cart_key_for_logging(cart_key), sanitize_id_for_logging(product_id), delta, new_quantity,
        )
        return new_quantity

    async def remove_item(self, cart_key: str, product_id: str) -> bool:
        """Delete one product's quantity. Returns whether it was present."""
        removed = bool(await self.redis.hdel(RedisKeys.items_key(cart_key), product_id))

        logger.debug(
            "Cart %s: removed product %s (existed: %s)",
            sanitize_cart_key_for_logging(cart_key), sanitize_id_for_logging(product_id), removed,
        )
        return removed

    async def delete_cart(self, cart_key: str) -> None:
        """Delete the quantities hash."""
        await self.redis.delete(RedisKeys.items_key(cart_key))
        logger.debug("Cart %s: deleted", sanitize_cart_key_for_logging(cart_key))

    async def exists(self, cart_key: str) -> bool:
        return bool(await self.redis.exists(RedisKeys.items_key(cart_key)))

    async def refresh_ttl(self, cart_key: str, ttl: int) -> None:
        """Reset expiry of all three hashes without touching their data."""
        for key in (
            RedisKeys.items_key(cart_key),
            RedisKeys.modifiers_key(cart_key),
            RedisKeys.selected_options_key(cart_key),
        ):
            await self.redis.expire(key, ttl)

    async def merge(self, source_key: str, dest_key: str, dest_ttl: int) -> None:
        """
        Fold source quantities into dest, then delete source.

        Products present on both sides get their quantities summed. An empty
        source is a no-op: dest is not created or touched.
        """
        source = RedisKeys.items_key(source_key)
        dest = RedisKeys.items_key(dest_key)

        source_entries = await self.redis.hgetall(source) or {}
        if not source_entries:
            logger.debug("Merge skipped: source cart %s is empty", sanitize_cart_key_for_logging(source_key))
            return

        merged = 0
        for product_id, raw in source_entries.items():
            quantity = _parse_quantity(raw)
            if quantity is None or quantity <= 0:
                continue
            await self.redis.hincrby(dest, str(product_id), quantity)
            merged += 1

        await self.redis.expire(dest, dest_ttl)
        await self.redis.delete(source)

        logger.info(
            "Merged cart %s into %s (%d items)",
            sanitize_cart_key_for_logging(source_key), sanitize_cart_key_for_logging(dest_key), merged,
        )

    # ==================== PRICE MODIFIERS ====================

    async def get_all_price_modifiers(self, cart_key: str) -> Dict[str, Decimal]:
        entries = await self.redis.hgetall(RedisKeys.modifiers_key(cart_key)) or {}

        modifiers: Dict[str, Decimal] = {}
        for product_id, raw in entries.items():
            modifier = parse_decimal(raw)
            if modifier is not None:
                modifiers[str(product_id)] = modifier
        return modifiers

    async def set_price_modifier(self, cart_key: str, product_id: str, price_modifier: Decimal, ttl: int) -> None:
        key = RedisKeys.modifiers_key(cart_key)
        await self.redis.hset(key, product_id, format_decimal(price_modifier))
        await self.redis.expire(key, ttl)

    async def remove_price_modifier(self, cart_key: str, product_id: str) -> bool:
        return bool(await self.redis.hdel(RedisKeys.modifiers_key(cart_key), product_id))

    async def delete_price_modifiers(self, cart_key: str) -> None:
        await self.redis.delete(RedisKeys.modifiers_key(cart_key))

    # ==================== SELECTED OPTIONS ====================

    async def get_all_selected_options(self, cart_key: str) -> Dict[str, str]:
        """Raw JSON per product; decoding is left to the engine."""
        entries = await self.redis.hgetall(RedisKeys.selected_options_key(cart_key)) or {}
        return {str(product_id): raw for product_id, raw in entries.items() if raw is not None}

    async def set_selected_options(self, cart_key: str, product_id: str, options_json: str, ttl: int) -> None:
        key = RedisKeys.selected_options_key(cart_key)
        await self.redis.hset(key, product_id, options_json)
        await self.redis.expire(key, ttl)

    async def remove_selected_options(self, cart_key: str, product_id: str) -> bool:
        return bool(await self.redis.hdel(RedisKeys.selected_options_key(cart_key), product_id))

    async def delete_all_selected_options(self, cart_key: str) -> None:
        await self.redis.delete(RedisKeys.selected_options_key(cart_key))
