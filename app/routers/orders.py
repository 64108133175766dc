# app/routers/orders.py
from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlmodel import Session

from app.db.repo import get_session
from app.deps import get_current_user_id
from app.services import orders
from app.services.errors import CheckoutError

router = APIRouter(prefix="/orders", tags=["orders"])


@router.post("/checkout", status_code=201)
def post_checkout(
    request: Request,
    user_id: str = Depends(get_current_user_id),
    session: Session = Depends(get_session),
) -> Dict[str, Any]:
    try:
        order = orders.checkout(session, user_id)
    except CheckoutError as e:
        raise HTTPException(status_code=400, detail=str(e))
    request.state.log_context.update({"order_id": order["id"], "order_total": order["total"]})
    return order


@router.get("")
def get_orders(user_id: str = Depends(get_current_user_id), session: Session = Depends(get_session)) -> List[Dict[str, Any]]:
    return orders.list_orders(session, user_id)
