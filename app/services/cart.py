# =============================================
# File: app/services/cart.py
# Purpose: Per-user cart: read with totals, upsert by (product, size, color), quantity updates and removal
# =============================================
from __future__ import annotations
from typing import Any, Dict, List, Optional, Tuple

from sqlmodel import Session, select
from loguru import logger

from app.db.models import CartItem, Product
from app.services.errors import CartValidationError, NotFoundError

SHIPPING_FEE = 0.0  # free shipping


def _rows(session: Session, user_id: str) -> List[Tuple[CartItem, Product]]:
    stmt = (
        select(CartItem, Product)
        .join(Product, Product.id == CartItem.product_id)
        .where(CartItem.user_id == user_id)
        .order_by(CartItem.created_at)
    )
    return list(session.exec(stmt).all())


def subtotal(lines: List[Tuple[float, int]]) -> float:
    """Sum of unit price x quantity over (price, quantity) pairs."""
    return round(sum(float(price) * int(qty) for price, qty in lines), 2)


def get_cart(session: Session, user_id: str) -> Dict[str, Any]:
    items: List[Dict[str, Any]] = []
    for item, product in _rows(session, user_id):
        items.append({
            "id": item.id,
            "product_id": product.id,
            "name": product.name,
            "slug": product.slug,
            "image": product.images[0] if product.images else None,
            "price": float(product.price),
            "quantity": item.quantity,
            "size": item.size or None,
            "color": item.color or None,
            "line_total": round(float(product.price) * item.quantity, 2),
        })
    sub = subtotal([(i["price"], i["quantity"]) for i in items])
    return {
        "items": items,
        "subtotal": sub,
        "shipping": SHIPPING_FEE,
        "total": round(sub + SHIPPING_FEE, 2),
        "count": sum(i["quantity"] for i in items),
    }


def cart_count(session: Session, user_id: str) -> int:
    items = session.exec(select(CartItem).where(CartItem.user_id == user_id)).all()
    return sum(i.quantity for i in items)


def _check_option(value: Optional[str], offered: List[str], label: str) -> str:
    value = (value or "").strip()
    if offered and not value:
        raise CartValidationError(f"Please select a {label}")
    if value and value not in offered:
        raise CartValidationError(f"{label.capitalize()} '{value}' is not available for this product")
    return value


def add_to_cart(
    session: Session,
    user_id: str,
    product_id: str,
    quantity: int = 1,
    size: Optional[str] = None,
    color: Optional[str] = None,
) -> CartItem:
    product = session.get(Product, product_id)
    if not product:
        raise NotFoundError("Product not found")
    size = _check_option(size, product.sizes or [], "size")
    color = _check_option(color, product.colors or [], "color")

    existing = session.exec(
        select(CartItem).where(
            CartItem.user_id == user_id,
            CartItem.product_id == product_id,
            CartItem.size == size,
            CartItem.color == color,
        )
    ).first()
    if existing:
        existing.quantity = quantity
        item = existing
    else:
        item = CartItem(user_id=user_id, product_id=product_id, quantity=quantity, size=size, color=color)
    session.add(item)
    session.commit()
    session.refresh(item)
    logger.info(f"[cart] upsert user={user_id} product={product_id} size={size!r} color={color!r} qty={quantity}")
    return item


def _own_item(session: Session, user_id: str, item_id: str) -> CartItem:
    item = session.get(CartItem, item_id)
    if not item or item.user_id != user_id:
        raise NotFoundError("Cart item not found")
    return item


def update_quantity(session: Session, user_id: str, item_id: str, quantity: int) -> Optional[CartItem]:
    """Returns the updated item, or None when quantity 0 removed it."""
    if quantity < 0:
        raise CartValidationError("Quantity must not be negative")
    item = _own_item(session, user_id, item_id)
    if quantity == 0:
        session.delete(item)
        session.commit()
        return None
    item.quantity = quantity
    session.add(item)
    session.commit()
    session.refresh(item)
    return item


def remove_item(session: Session, user_id: str, item_id: str) -> None:
    item = _own_item(session, user_id, item_id)
    session.delete(item)
    session.commit()
