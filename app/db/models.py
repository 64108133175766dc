# =============================================
# File: app/db/models.py
# Purpose: SQLModel ORM definitions for the storefront: catalog, carts, orders, browsing history, AI recommendations and roles.
# =============================================

from sqlmodel import SQLModel, Field
from sqlalchemy import Column, JSON, UniqueConstraint
from typing import List, Optional
from datetime import datetime
import uuid


def new_id() -> str:
    return str(uuid.uuid4())


class Category(SQLModel, table=True):
    __tablename__ = "categories"

    id: str = Field(default_factory=new_id, primary_key=True)
    name: str
    slug: str = Field(index=True, unique=True)


class Product(SQLModel, table=True):
    __tablename__ = "products"

    id: str = Field(default_factory=new_id, primary_key=True)
    name: str
    slug: str = Field(index=True, unique=True)
    description: Optional[str] = None
    price: float = Field(ge=0)
    stock: int = Field(default=0, ge=0)
    images: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    sizes: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    colors: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    category_id: Optional[str] = Field(default=None, foreign_key="categories.id")
    featured: bool = False
    created_at: datetime = Field(default_factory=datetime.utcnow)


class CartItem(SQLModel, table=True):
    __tablename__ = "cart_items"
    __table_args__ = (UniqueConstraint("user_id", "product_id", "size", "color"),)

    id: str = Field(default_factory=new_id, primary_key=True)
    user_id: str = Field(index=True)
    product_id: str = Field(foreign_key="products.id")
    quantity: int = Field(default=1, ge=0)
    # "" when the product has no size/color, so the unique key stays comparable
    size: str = ""
    color: str = ""
    created_at: datetime = Field(default_factory=datetime.utcnow)


class Order(SQLModel, table=True):
    __tablename__ = "orders"

    id: str = Field(default_factory=new_id, primary_key=True)
    user_id: str = Field(index=True)
    total: float = Field(default=0, ge=0)
    status: str = "pending"
    created_at: datetime = Field(default_factory=datetime.utcnow)


class OrderItem(SQLModel, table=True):
    __tablename__ = "order_items"

    id: str = Field(default_factory=new_id, primary_key=True)
    order_id: str = Field(foreign_key="orders.id", index=True)
    product_id: str = Field(foreign_key="products.id")
    quantity: int = Field(ge=1)
    price: float = Field(ge=0)  # unit price at purchase time


class BrowsingHistory(SQLModel, table=True):
    __tablename__ = "browsing_history"

    id: str = Field(default_factory=new_id, primary_key=True)
    user_id: str = Field(index=True)
    product_id: str = Field(foreign_key="products.id")
    viewed_at: datetime = Field(default_factory=datetime.utcnow)


class ProductRecommendation(SQLModel, table=True):
    __tablename__ = "product_recommendations"
    __table_args__ = (UniqueConstraint("user_id", "product_id"),)

    id: str = Field(default_factory=new_id, primary_key=True)
    user_id: str = Field(index=True)
    product_id: str = Field(foreign_key="products.id")
    reason: str = ""
    score: int = 0
    created_at: datetime = Field(default_factory=datetime.utcnow)


class UserRole(SQLModel, table=True):
    __tablename__ = "user_roles"
    __table_args__ = (UniqueConstraint("user_id", "role"),)

    id: str = Field(default_factory=new_id, primary_key=True)
    user_id: str = Field(index=True)
    role: str


class Profile(SQLModel, table=True):
    __tablename__ = "profiles"

    id: str = Field(primary_key=True)  # same id as the auth provider's user
    full_name: Optional[str] = None
    email: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
