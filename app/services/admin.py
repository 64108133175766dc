# =============================================
# File: app/services/admin.py
# Purpose: Admin dashboard queries (role check, stats, recent orders) and product management
# =============================================
from __future__ import annotations
from typing import Any, Dict, List

from sqlalchemy import delete, func
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select
from loguru import logger

from app.db.models import BrowsingHistory, CartItem, Order, OrderItem, Product, ProductRecommendation, Profile, UserRole
from app.services.errors import NotFoundError, ProductConflictError

ADMIN_ROLE = "admin"


def is_admin(session: Session, user_id: str) -> bool:
    row = session.exec(
        select(UserRole).where(UserRole.user_id == user_id, UserRole.role == ADMIN_ROLE)
    ).first()
    return row is not None


def grant_role(session: Session, user_id: str, role: str = ADMIN_ROLE) -> UserRole:
    existing = session.exec(select(UserRole).where(UserRole.user_id == user_id, UserRole.role == role)).first()
    if existing:
        return existing
    row = UserRole(user_id=user_id, role=role)
    session.add(row)
    session.commit()
    session.refresh(row)
    return row


def _count(session: Session, model) -> int:
    return int(session.exec(select(func.count()).select_from(model)).one())


def stats(session: Session) -> Dict[str, Any]:
    revenue = session.exec(select(func.coalesce(func.sum(Order.total), 0))).one()
    return {
        "products": _count(session, Product),
        "orders": _count(session, Order),
        "users": _count(session, Profile),
        "revenue": round(float(revenue or 0), 2),
    }


def recent_orders(session: Session, limit: int = 10) -> List[Dict[str, Any]]:
    stmt = (
        select(Order, Profile)
        .join(Profile, Profile.id == Order.user_id, isouter=True)
        .order_by(Order.created_at.desc())
        .limit(limit)
    )
    out = []
    for order, profile in session.exec(stmt).all():
        data = order.model_dump()
        data["customer"] = {
            "full_name": profile.full_name if profile else None,
            "email": profile.email if profile else None,
        }
        out.append(data)
    return out


def list_products(session: Session) -> List[Product]:
    return list(session.exec(select(Product).order_by(Product.created_at.desc())).all())


def _commit_product(session: Session, product: Product) -> Product:
    session.add(product)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise ProductConflictError(f"A product with slug '{product.slug}' already exists")
    session.refresh(product)
    return product


def create_product(session: Session, data: Dict[str, Any]) -> Product:
    product = _commit_product(session, Product(**data))
    logger.info(f"[admin] product created id={product.id} slug={product.slug}")
    return product


def update_product(session: Session, product_id: str, changes: Dict[str, Any]) -> Product:
    product = session.get(Product, product_id)
    if not product:
        raise NotFoundError("Product not found")
    for k, v in changes.items():
        setattr(product, k, v)
    return _commit_product(session, product)


def delete_product(session: Session, product_id: str) -> None:
    product = session.get(Product, product_id)
    if not product:
        raise NotFoundError("Product not found")
    # order lines keep their product; shopper-side rows go with it
    if session.exec(select(OrderItem).where(OrderItem.product_id == product_id)).first() is not None:
        raise ProductConflictError("Product has been ordered and cannot be deleted")
    for model in (CartItem, BrowsingHistory, ProductRecommendation):
        session.execute(delete(model).where(model.product_id == product_id))
    session.delete(product)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise ProductConflictError("Product is still referenced and cannot be deleted")
    logger.info(f"[admin] product deleted id={product_id}")
