"""
SimCart Module

Shopping-cart engine backed by Redis:
- db: Redis and Supabase clients, key builders, TTLs
- cart: cart store (raw hashes) and cart engine (pricing, merge)
- services: money helpers, catalog models and repositories
- routers: FastAPI cart endpoints

Note: Imports are lazy to keep module loading cheap in serverless environments.
"""

__all__ = [
    "get_redis",
    "get_supabase",
    "RedisKeys",
    "TTL",
]


def __getattr__(name):
    if name in __all__:
        from simcart import db
        return getattr(db, name)
    raise AttributeError(f"module 'simcart' has no attribute {name!r}")
