"""
Cart Router

Shopping cart endpoints.

Authenticated users: cart identified by user id (cart:user:{id}).
Anonymous users: send header X-Cart-Session: {uuid} generated on the client.

Right after login the client calls POST /cart/merge with the session id it
was using, folding the anonymous cart into the user's.

Amounts are returned as floats; pricing itself is Decimal.
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Response

from simcart.cart import AddToCart, CartEngine, get_cart_engine, session_cart_key, user_cart_key
from simcart.cart.service import DEFAULT_LOCALE
from simcart.errors import (
    ERROR_INTERNAL,
    ERROR_UNAUTHORIZED,
    CartError,
    CartItemNotFoundError,
    ProductNotFoundError,
)
from simcart.logging import get_logger
from .deps import get_cart_key, get_current_user_id
from .models import AddToCartRequest, MergeCartRequest, UpdateCartItemRequest

logger = get_logger(__name__)

router = APIRouter(tags=["cart"])


def _to_http_error(error: CartError) -> HTTPException:
    """Missing product/item -> 404, other rule violations -> 400."""
    if isinstance(error, (ProductNotFoundError, CartItemNotFoundError)):
        return HTTPException(status_code=404, detail=str(error))
    return HTTPException(status_code=400, detail=str(error))


@router.get("/cart")
async def get_cart(
    locale: str = DEFAULT_LOCALE,
    cart_key: str = Depends(get_cart_key),
    engine: CartEngine = Depends(get_cart_engine),
):
    """Get the current cart with computed totals."""
    try:
        cart = await engine.get_cart(cart_key, locale)
    except Exception as e:
        logger.error("Failed to get cart: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail=ERROR_INTERNAL)
    return cart.to_dict()


@router.post("/cart/items")
async def add_to_cart(
    request: AddToCartRequest,
    locale: str = DEFAULT_LOCALE,
    cart_key: str = Depends(get_cart_key),
    engine: CartEngine = Depends(get_cart_engine),
):
    """Add a product; increments the quantity if it is already in the cart."""
    try:
        cart = await engine.add_item(
            cart_key,
            AddToCart(
                product_id=request.product_id,
                quantity=request.quantity,
                selected_component_ids=request.selected_component_ids,
                selected_options=[option.to_option() for option in request.selected_options],
            ),
            locale,
        )
    except CartError as ce:
        logger.warning("AddItem rejected: %s", ce)
        raise _to_http_error(ce)
    except Exception as e:
        logger.error("Failed to add to cart: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to add item to cart")
    return cart.to_dict()


@router.put("/cart/items/{product_id}")
async def update_cart_item(
    product_id: str,
    request: UpdateCartItemRequest,
    locale: str = DEFAULT_LOCALE,
    cart_key: str = Depends(get_cart_key),
    engine: CartEngine = Depends(get_cart_engine),
):
    """Set the quantity of a product already in the cart."""
    try:
        cart = await engine.update_item(cart_key, product_id, request.quantity, locale)
    except CartError as ce:
        raise _to_http_error(ce)
    except Exception as e:
        logger.error("Failed to update cart item: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to update cart item")
    return cart.to_dict()


@router.delete("/cart/items/{product_id}", status_code=204)
async def remove_cart_item(
    product_id: str,
    cart_key: str = Depends(get_cart_key),
    engine: CartEngine = Depends(get_cart_engine),
):
    """Remove a product from the cart."""
    try:
        await engine.remove_item(cart_key, product_id)
    except Exception as e:
        logger.error("Failed to remove cart item: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to remove cart item")
    return Response(status_code=204)


@router.delete("/cart", status_code=204)
async def clear_cart(
    cart_key: str = Depends(get_cart_key),
    engine: CartEngine = Depends(get_cart_engine),
):
    """Empty the whole cart."""
    try:
        await engine.clear_cart(cart_key)
    except Exception as e:
        logger.error("Failed to clear cart: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to clear cart")
    return Response(status_code=204)


@router.post("/cart/merge")
async def merge_cart(
    request: MergeCartRequest,
    locale: str = DEFAULT_LOCALE,
    user_id: Optional[str] = Depends(get_current_user_id),
    engine: CartEngine = Depends(get_cart_engine),
):
    """
    Merge the anonymous session cart into the authenticated user's cart.

    Repeated products have their quantities summed; the session cart is
    deleted afterwards.
    """
    if not user_id:
        raise HTTPException(status_code=401, detail=ERROR_UNAUTHORIZED)

    try:
        cart = await engine.merge_carts(
            session_cart_key(request.session_id),
            user_cart_key(user_id),
            locale,
        )
    except Exception as e:
        logger.error("Failed to merge carts: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to merge carts")
    return cart.to_dict()
