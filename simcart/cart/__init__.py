"""Cart package: models, Redis store, and engine."""
from .models import (
    MAX_QUANTITY_PER_PRODUCT,
    AddToCart,
    CartLine,
    CartView,
    SelectedOption,
    parse_options,
    serialize_options,
)
from .storage import CartStore
from .service import CartEngine, cart_ttl, get_cart_engine, session_cart_key, user_cart_key

__all__ = [
    "MAX_QUANTITY_PER_PRODUCT",
    "AddToCart",
    "CartLine",
    "CartView",
    "SelectedOption",
    "parse_options",
    "serialize_options",
    "CartStore",
    "CartEngine",
    "cart_ttl",
    "get_cart_engine",
    "session_cart_key",
    "user_cart_key",
]
