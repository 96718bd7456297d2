"""
Database Module - Redis and Supabase Clients

Provides singleton instances of:
- Async Upstash Redis client for cart storage
- Async Supabase client for read-only catalog lookups

Plus the Redis key layout and TTL constants used by the cart store.
"""

import os
from typing import Optional

from supabase._async.client import AsyncClient, create_client as acreate_client
from upstash_redis.asyncio import Redis as AsyncRedis


# Upstash uses REST_URL and REST_TOKEN
UPSTASH_REDIS_REST_URL = os.environ.get("UPSTASH_REDIS_REST_URL", "")
UPSTASH_REDIS_REST_TOKEN = os.environ.get("UPSTASH_REDIS_REST_TOKEN", "")

SUPABASE_URL = os.environ.get("SUPABASE_URL", "")
SUPABASE_SERVICE_ROLE_KEY = os.environ.get("SUPABASE_SERVICE_ROLE_KEY", "")

# Namespace shared with other services on the same Redis database
CART_KEY_PREFIX = os.environ.get("CART_KEY_PREFIX", "SimRacingShop:")


_redis_client: Optional[AsyncRedis] = None
_async_supabase_client: Optional[AsyncClient] = None


def get_redis() -> AsyncRedis:
    """
    Get async Upstash Redis client (singleton).

    Uses standard Upstash env var names:
    - UPSTASH_REDIS_REST_URL
    - UPSTASH_REDIS_REST_TOKEN
    """
    global _redis_client

    if _redis_client is None:
        if not UPSTASH_REDIS_REST_URL or not UPSTASH_REDIS_REST_TOKEN:
            raise ValueError("UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN must be set")
        _redis_client = AsyncRedis(url=UPSTASH_REDIS_REST_URL, token=UPSTASH_REDIS_REST_TOKEN)

    return _redis_client


async def get_supabase() -> AsyncClient:
    """Get async Supabase client (singleton)."""
    global _async_supabase_client

    if _async_supabase_client is None:
        if not SUPABASE_URL or not SUPABASE_SERVICE_ROLE_KEY:
            raise ValueError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set")
        _async_supabase_client = await acreate_client(SUPABASE_URL, SUPABASE_SERVICE_ROLE_KEY)

    return _async_supabase_client


class RedisKeys:
    """
    Cart key layout.

    Logical cart keys carry the cart shape:
        cart:user:{user_id}        authenticated cart
        cart:session:{session_id}  anonymous cart

    Each logical key maps to three hashes, all fields keyed by product id:
        {prefix}{cart_key}                  -> quantity
        {prefix}{cart_key}:modifiers        -> price modifier
        {prefix}{cart_key}:selectedoptions  -> selected options JSON
    """

    USER_CART = "cart:user:"
    SESSION_CART = "cart:session:"

    MODIFIERS_SUFFIX = ":modifiers"
    SELECTED_OPTIONS_SUFFIX = ":selectedoptions"

    @staticmethod
    def user_cart_key(user_id) -> str:
        return f"{RedisKeys.USER_CART}{user_id}"

    @staticmethod
    def session_cart_key(session_id: str) -> str:
        return f"{RedisKeys.SESSION_CART}{session_id}"

    @staticmethod
    def is_user_cart(cart_key: str) -> bool:
        return cart_key.startswith(RedisKeys.USER_CART)

    @staticmethod
    def items_key(cart_key: str) -> str:
        return f"{CART_KEY_PREFIX}{cart_key}"

    @staticmethod
    def modifiers_key(cart_key: str) -> str:
        return f"{CART_KEY_PREFIX}{cart_key}{RedisKeys.MODIFIERS_SUFFIX}"

    @staticmethod
    def selected_options_key(cart_key: str) -> str:
        return f"{CART_KEY_PREFIX}{cart_key}{RedisKeys.SELECTED_OPTIONS_SUFFIX}"


class TTL:
    """Time-to-live constants for Redis keys (seconds)."""

    SESSION_CART = 7 * 86400  # 7 days
    USER_CART = 30 * 86400  # 30 days

    @staticmethod
    def for_cart(cart_key: str) -> int:
        """User carts live longer than anonymous ones."""
        return TTL.USER_CART if RedisKeys.is_user_cart(cart_key) else TTL.SESSION_CART
