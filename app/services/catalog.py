# =============================================
# File: app/services/catalog.py
# Purpose: Catalog reads: categories, product listing/filtering, featured items, product detail + view tracking
# =============================================
from __future__ import annotations
from typing import Any, Dict, List, Optional

from sqlmodel import Session, select
from loguru import logger

from app.db.models import BrowsingHistory, Category, Product
from app.services.errors import NotFoundError

LOW_STOCK_THRESHOLD = 10


def stock_badge(stock: int) -> Optional[str]:
    if stock <= 0:
        return "out_of_stock"
    if stock < LOW_STOCK_THRESHOLD:
        return "low_stock"
    return None


def product_out(product: Product, category_name: Optional[str] = None) -> Dict[str, Any]:
    data = product.model_dump()
    data["category_name"] = category_name
    data["stock_badge"] = stock_badge(product.stock)
    return data


def _with_categories(session: Session, products: List[Product]) -> List[Dict[str, Any]]:
    names = {c.id: c.name for c in session.exec(select(Category)).all()}
    return [product_out(p, names.get(p.category_id)) for p in products]


def list_categories(session: Session) -> List[Category]:
    return list(session.exec(select(Category).order_by(Category.name)).all())


def list_products(session: Session, category_slug: Optional[str] = None) -> List[Dict[str, Any]]:
    stmt = select(Product)
    if category_slug:
        cat = session.exec(select(Category).where(Category.slug == category_slug)).first()
        # an unknown slug leaves the listing unfiltered
        if cat:
            stmt = stmt.where(Product.category_id == cat.id)
    return _with_categories(session, list(session.exec(stmt.order_by(Product.name)).all()))


def featured_products(session: Session, limit: int = 6) -> List[Dict[str, Any]]:
    stmt = select(Product).where(Product.featured == True).limit(limit)  # noqa: E712
    return _with_categories(session, list(session.exec(stmt).all()))


def get_product(session: Session, slug: str, user_id: Optional[str] = None) -> Dict[str, Any]:
    product = session.exec(select(Product).where(Product.slug == slug)).first()
    if not product:
        raise NotFoundError("Product not found")
    if user_id:
        session.add(BrowsingHistory(user_id=user_id, product_id=product.id))
        session.commit()
        session.refresh(product)
        logger.debug(f"[catalog] view user={user_id} product={product.id}")
    category = session.get(Category, product.category_id) if product.category_id else None
    return product_out(product, category.name if category else None)
