# app/routers/cart.py
from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlmodel import Session

from app.db.repo import get_session
from app.deps import get_current_user_id
from app.services import cart
from app.services.errors import CartValidationError, NotFoundError

router = APIRouter(prefix="/cart", tags=["cart"])


# --------- Schemas ---------

class AddToCartRequest(BaseModel):
    product_id: str = Field(..., min_length=1)
    quantity: int = Field(1, ge=1, le=99)
    size: Optional[str] = None
    color: Optional[str] = None


class UpdateQuantityRequest(BaseModel):
    quantity: int = Field(..., ge=0, le=99)


def _translate(e: Exception) -> HTTPException:
    if isinstance(e, NotFoundError):
        return HTTPException(status_code=404, detail=str(e))
    return HTTPException(status_code=400, detail=str(e))


# --------- Routes ---------

@router.get("")
def get_cart(user_id: str = Depends(get_current_user_id), session: Session = Depends(get_session)) -> Dict[str, Any]:
    return cart.get_cart(session, user_id)


@router.get("/count")
def get_cart_count(user_id: str = Depends(get_current_user_id), session: Session = Depends(get_session)) -> Dict[str, int]:
    return {"count": cart.cart_count(session, user_id)}


@router.post("", status_code=201)
def add_item(
    req: AddToCartRequest,
    user_id: str = Depends(get_current_user_id),
    session: Session = Depends(get_session),
) -> Dict[str, Any]:
    try:
        item = cart.add_to_cart(session, user_id, req.product_id, req.quantity, req.size, req.color)
    except (NotFoundError, CartValidationError) as e:
        raise _translate(e)
    return item.model_dump()


@router.patch("/{item_id}")
def update_item(
    item_id: str,
    req: UpdateQuantityRequest,
    user_id: str = Depends(get_current_user_id),
    session: Session = Depends(get_session),
) -> Dict[str, Any]:
    """Quantity 0 removes the line."""
    try:
        item = cart.update_quantity(session, user_id, item_id, req.quantity)
    except (NotFoundError, CartValidationError) as e:
        raise _translate(e)
    if item is None:
        return {"id": item_id, "removed": True}
    return {**item.model_dump(), "removed": False}


@router.delete("/{item_id}")
def delete_item(
    item_id: str,
    user_id: str = Depends(get_current_user_id),
    session: Session = Depends(get_session),
) -> Dict[str, Any]:
    try:
        cart.remove_item(session, user_id, item_id)
    except NotFoundError as e:
        raise _translate(e)
    return {"ok": True}
