# =============================================
# File: app/services/recommender.py
# Purpose: AI product recommendations from browsing + purchase history, joined back to the catalog and persisted
# =============================================
from __future__ import annotations
import os
from typing import Any, Dict, List

from sqlmodel import Session, select
from loguru import logger

from app.db.models import BrowsingHistory, Order, OrderItem, Product, ProductRecommendation
from app.services import ai_client
from app.services.errors import RecommendationError
from app.utils.ai_reply import parse_recommendations
from app.utils.prompting import build_recommendation_messages

RECOMMEND_MODEL = os.getenv("RECOMMEND_MODEL", "google/gemini-2.5-flash")
HISTORY_LIMIT = 20
RECOMMENDATION_SCORE = 90


def _brief(p: Product) -> Dict[str, Any]:
    return {"id": p.id, "name": p.name, "price": p.price, "category_id": p.category_id}


def viewed_products(session: Session, user_id: str, limit: int = HISTORY_LIMIT) -> List[Dict[str, Any]]:
    stmt = (
        select(Product)
        .join(BrowsingHistory, BrowsingHistory.product_id == Product.id)
        .where(BrowsingHistory.user_id == user_id)
        .order_by(BrowsingHistory.viewed_at.desc())
        .limit(limit)
    )
    return [_brief(p) for p in session.exec(stmt).all()]


def purchased_products(session: Session, user_id: str) -> List[Dict[str, Any]]:
    stmt = (
        select(Product)
        .join(OrderItem, OrderItem.product_id == Product.id)
        .join(Order, Order.id == OrderItem.order_id)
        .where(Order.user_id == user_id)
    )
    return [_brief(p) for p in session.exec(stmt).all()]


def _store(session: Session, user_id: str, recs: List[Dict[str, Any]]) -> None:
    for rec in recs:
        row = session.exec(
            select(ProductRecommendation).where(
                ProductRecommendation.user_id == user_id,
                ProductRecommendation.product_id == rec["product_id"],
            )
        ).first()
        if row is None:
            row = ProductRecommendation(user_id=user_id, product_id=rec["product_id"])
        row.reason = rec["reason"]
        row.score = RECOMMENDATION_SCORE
        session.add(row)
    session.commit()


def get_recommendations(session: Session, user_id: str, client=None) -> List[Dict[str, Any]]:
    """
    Returns [{product_id, reason, product_name, product_slug, product_price}].
    No history (or no catalog) -> [] without calling the model.
    """
    viewed = viewed_products(session, user_id)
    catalog = list(session.exec(select(Product)).all())
    if not viewed or not catalog:
        logger.info(f"[recommend] user={user_id} skipped: history={len(viewed)} catalog={len(catalog)}")
        return []

    purchased = purchased_products(session, user_id)
    messages = build_recommendation_messages(
        viewed,
        purchased,
        [{"id": p.id, "name": p.name, "price": p.price, "description": p.description} for p in catalog],
    )
    reply = ai_client.complete(messages, model=RECOMMEND_MODEL, client=client)

    try:
        picks = parse_recommendations(ai_client.reply_text(reply))
    except ValueError as e:
        raise RecommendationError(f"Could not parse model recommendations: {e}") from e

    by_id = {p.id: p for p in catalog}
    enriched: List[Dict[str, Any]] = []
    seen = set()
    for pick in picks:
        product = by_id.get(pick["product_id"])
        if product is None:
            logger.warning(f"[recommend] user={user_id} dropped unknown product_id={pick['product_id']}")
            continue
        if product.id in seen:
            continue
        seen.add(product.id)
        enriched.append({
            "product_id": product.id,
            "reason": pick["reason"],
            "product_name": product.name,
            "product_slug": product.slug,
            "product_price": float(product.price),
        })

    _store(session, user_id, enriched)
    logger.info(f"[recommend] user={user_id} viewed={len(viewed)} purchased={len(purchased)} picks={len(enriched)}")
    return enriched
