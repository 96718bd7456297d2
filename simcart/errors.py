"""
Cart Errors

Message constants (shared by the engine and the HTTP layer) and the
exception types the cart engine raises. Every cart error is a ValueError so
callers that only know about ValueError keep working.
"""

# Product errors
ERROR_PRODUCT_NOT_FOUND = "Product not found"
ERROR_PRODUCT_NOT_AVAILABLE = "Product is not available"

# Cart errors
ERROR_CART_ITEM_NOT_FOUND = "Product is not in the cart"
ERROR_QUANTITY_LIMIT_EXCEEDED = "Cannot add more than {limit} units of the same product"
ERROR_INVALID_QUANTITY = "Quantity must be a positive integer"
ERROR_CART_KEY_REQUIRED = "Authentication or the '{header}' header is required to access the cart"

# Generic errors
ERROR_UNAUTHORIZED = "Unauthorized"
ERROR_INTERNAL = "Internal server error"


class CartError(ValueError):
    """Base class for business-rule violations on the cart write path."""

    message = ERROR_INTERNAL

    def __init__(self, message: str | None = None, *, product_id: str | None = None):
        self.product_id = product_id
        super().__init__(message or self.message)


class ProductNotFoundError(CartError):
    message = ERROR_PRODUCT_NOT_FOUND


class ProductNotAvailableError(CartError):
    message = ERROR_PRODUCT_NOT_AVAILABLE


class CartItemNotFoundError(CartError):
    message = ERROR_CART_ITEM_NOT_FOUND


class InvalidQuantityError(CartError):
    message = ERROR_INVALID_QUANTITY


class QuantityLimitExceededError(CartError):
    """Resulting per-product quantity would go over the cap."""

    def __init__(self, limit: int, *, product_id: str | None = None):
        self.limit = limit
        super().__init__(ERROR_QUANTITY_LIMIT_EXCEEDED.format(limit=limit), product_id=product_id)


__all__ = [
    "ERROR_PRODUCT_NOT_FOUND",
    "ERROR_PRODUCT_NOT_AVAILABLE",
    "ERROR_CART_ITEM_NOT_FOUND",
    "ERROR_QUANTITY_LIMIT_EXCEEDED",
    "ERROR_INVALID_QUANTITY",
    "ERROR_CART_KEY_REQUIRED",
    "ERROR_UNAUTHORIZED",
    "ERROR_INTERNAL",
    "CartError",
    "ProductNotFoundError",
    "ProductNotAvailableError",
    "CartItemNotFoundError",
    "InvalidQuantityError",
    "QuantityLimitExceededError",
]
