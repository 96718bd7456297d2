"""
Shared Dependencies for the Cart Router

Cart key resolution: an authenticated user owns cart:user:{id}; anonymous
clients send a client-generated X-Cart-Session header.
"""

from typing import Optional

from fastapi import Depends, Header, HTTPException, Request

from simcart.cart import session_cart_key, user_cart_key
from simcart.errors import ERROR_CART_KEY_REQUIRED

SESSION_HEADER = "X-Cart-Session"
MAX_SESSION_ID_LENGTH = 100


async def get_current_user_id(request: Request) -> Optional[str]:
    """
    Authenticated user id, if any.

    Identity is resolved upstream (auth middleware sets request.state.user_id);
    apps with another auth scheme override this dependency.
    """
    user_id = getattr(request.state, "user_id", None)
    return str(user_id) if user_id else None


async def get_cart_key(
    user_id: Optional[str] = Depends(get_current_user_id),
    session_id: Optional[str] = Header(None, alias=SESSION_HEADER),
) -> str:
    """User cart when logged in, session cart otherwise."""
    if user_id:
        return user_cart_key(user_id)

    session_id = (session_id or "").strip()
    if not session_id or len(session_id) > MAX_SESSION_ID_LENGTH:
        raise HTTPException(status_code=400, detail=ERROR_CART_KEY_REQUIRED.format(header=SESSION_HEADER))
    return session_cart_key(session_id)
