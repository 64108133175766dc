# =============================================
# File: app/services/orders.py
# Purpose: Checkout from the cart and order history
# =============================================
from __future__ import annotations
from collections import Counter
from typing import Any, Dict, List

from sqlmodel import Session, select
from loguru import logger

from app.db.models import CartItem, Order, OrderItem, Product
from app.services.cart import subtotal
from app.services.errors import CheckoutError


def order_out(order: Order, items: List[OrderItem]) -> Dict[str, Any]:
    data = order.model_dump()
    data["items"] = [i.model_dump() for i in items]
    return data


def checkout(session: Session, user_id: str) -> Dict[str, Any]:
    rows = session.exec(
        select(CartItem, Product)
        .join(Product, Product.id == CartItem.product_id)
        .where(CartItem.user_id == user_id)
    ).all()
    if not rows:
        raise CheckoutError("Cart is empty")

    # several lines (sizes, colours) can draw on the same product
    wanted: Counter = Counter()
    products: Dict[str, Product] = {}
    for item, product in rows:
        wanted[product.id] += item.quantity
        products[product.id] = product
    for pid, qty in wanted.items():
        if products[pid].stock < qty:
            raise CheckoutError(f"Insufficient stock for {products[pid].name}")

    order = Order(user_id=user_id, total=subtotal([(p.price, i.quantity) for i, p in rows]))
    session.add(order)
    lines: List[OrderItem] = []
    for item, product in rows:
        line = OrderItem(order_id=order.id, product_id=product.id, quantity=item.quantity, price=float(product.price))
        lines.append(line)
        session.add(line)
        product.stock -= item.quantity
        session.add(product)
        session.delete(item)
    session.commit()
    session.refresh(order)
    for line in lines:
        session.refresh(line)
    logger.info(f"[orders] checkout user={user_id} order={order.id} total={order.total} lines={len(lines)}")
    return order_out(order, lines)


def list_orders(session: Session, user_id: str) -> List[Dict[str, Any]]:
    orders = session.exec(
        select(Order).where(Order.user_id == user_id).order_by(Order.created_at.desc())
    ).all()
    out = []
    for o in orders:
        items = session.exec(select(OrderItem).where(OrderItem.order_id == o.id)).all()
        out.append(order_out(o, list(items)))
    return out
