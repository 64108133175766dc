# app/routers/catalog.py
from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlmodel import Session

from app.db.models import Category
from app.db.repo import get_session
from app.deps import get_optional_user_id
from app.services import catalog
from app.services.errors import NotFoundError

router = APIRouter(tags=["catalog"])


@router.get("/categories", response_model=List[Category])
def get_categories(session: Session = Depends(get_session)):
    return catalog.list_categories(session)


@router.get("/products")
def get_products(
    category: Optional[str] = Query(None, description="Category slug"),
    session: Session = Depends(get_session),
) -> List[Dict[str, Any]]:
    return catalog.list_products(session, category_slug=category)


@router.get("/products/featured")
def get_featured(
    limit: int = Query(6, ge=1, le=24),
    session: Session = Depends(get_session),
) -> List[Dict[str, Any]]:
    return catalog.featured_products(session, limit=limit)


@router.get("/products/{slug}")
def get_product(
    slug: str,
    session: Session = Depends(get_session),
    user_id: Optional[str] = Depends(get_optional_user_id),
) -> Dict[str, Any]:
    """Product detail; a signed-in view is appended to the browsing history."""
    try:
        return catalog.get_product(session, slug, user_id=user_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
