# app/routers/admin.py
from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field
from sqlmodel import Session

from app.db.repo import get_session
from app.deps import get_current_user_id, require_admin
from app.services import admin
from app.services.catalog import product_out
from app.services.errors import NotFoundError, ProductConflictError

router = APIRouter(prefix="/admin", tags=["admin"])


# --------- Schemas ---------

class ProductIn(BaseModel):
    name: str = Field(..., min_length=1)
    slug: str = Field(..., min_length=1, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
    description: Optional[str] = None
    price: float = Field(..., ge=0)
    stock: int = Field(0, ge=0)
    images: List[str] = []
    sizes: List[str] = []
    colors: List[str] = []
    category_id: Optional[str] = None
    featured: bool = False


class ProductUpdate(BaseModel):
    name: Optional[str] = None
    slug: Optional[str] = Field(None, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
    description: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    stock: Optional[int] = Field(None, ge=0)
    images: Optional[List[str]] = None
    sizes: Optional[List[str]] = None
    colors: Optional[List[str]] = None
    category_id: Optional[str] = None
    featured: Optional[bool] = None


# --------- Routes ---------

@router.get("/me")
def whoami(user_id: str = Depends(get_current_user_id), session: Session = Depends(get_session)) -> Dict[str, Any]:
    return {"user_id": user_id, "is_admin": admin.is_admin(session, user_id)}


@router.get("/stats", dependencies=[Depends(require_admin)])
def get_stats(session: Session = Depends(get_session)) -> Dict[str, Any]:
    return admin.stats(session)


@router.get("/orders", dependencies=[Depends(require_admin)])
def get_recent_orders(
    limit: int = Query(10, ge=1, le=100),
    session: Session = Depends(get_session),
) -> List[Dict[str, Any]]:
    return admin.recent_orders(session, limit=limit)


@router.get("/products", dependencies=[Depends(require_admin)])
def get_products(session: Session = Depends(get_session)) -> List[Dict[str, Any]]:
    return [product_out(p) for p in admin.list_products(session)]


@router.post("/products", status_code=201, dependencies=[Depends(require_admin)])
def post_product(data: ProductIn, session: Session = Depends(get_session)) -> Dict[str, Any]:
    try:
        product = admin.create_product(session, data.model_dump())
    except ProductConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return product_out(product)


@router.patch("/products/{product_id}", dependencies=[Depends(require_admin)])
def patch_product(product_id: str, data: ProductUpdate, session: Session = Depends(get_session)) -> Dict[str, Any]:
    changes = data.model_dump(exclude_unset=True)
    if not changes:
        raise HTTPException(status_code=400, detail="No fields to update")
    try:
        product = admin.update_product(session, product_id, changes)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ProductConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return product_out(product)


@router.delete("/products/{product_id}", dependencies=[Depends(require_admin)])
def delete_product(product_id: str, session: Session = Depends(get_session)) -> Dict[str, Any]:
    try:
        admin.delete_product(session, product_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ProductConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return {"ok": True}
