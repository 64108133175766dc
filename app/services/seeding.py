# =============================================
# File: app/services/seeding.py
# Purpose: Seed the catalog with sample categories/products for local development.
# =============================================
from __future__ import annotations
from typing import Dict, List, Tuple

from sqlalchemy import delete
from sqlmodel import Session, select

from app.db.models import BrowsingHistory, CartItem, Category, OrderItem, Product, ProductRecommendation

SAMPLE_CATEGORIES: List[Dict[str, str]] = [
    {"name": "Women", "slug": "women"},
    {"name": "Men", "slug": "men"},
    {"name": "Accessories", "slug": "accessories"},
]

SAMPLE_PRODUCTS: List[Dict] = [
    {
        "name": "Silk Evening Gown",
        "slug": "silk-evening-gown",
        "description": "Floor-length mulberry silk gown with a draped back.",
        "price": 1250.0,
        "stock": 8,
        "images": ["https://images.unsplash.com/photo-1566174053879-31528523f8ae?w=800"],
        "sizes": ["XS", "S", "M", "L"],
        "colors": ["Black", "Champagne"],
        "category": "women",
        "featured": True,
    },
    {
        "name": "Cashmere Wrap Coat",
        "slug": "cashmere-wrap-coat",
        "description": "Double-faced cashmere coat with a belted waist.",
        "price": 2100.0,
        "stock": 12,
        "images": ["https://images.unsplash.com/photo-1539533018447-63fcce2678e3?w=800"],
        "sizes": ["S", "M", "L"],
        "colors": ["Camel", "Charcoal"],
        "category": "women",
        "featured": True,
    },
    {
        "name": "Tailored Wool Blazer",
        "slug": "tailored-wool-blazer",
        "description": "Italian wool blazer with peak lapels.",
        "price": 890.0,
        "stock": 20,
        "images": ["https://images.unsplash.com/photo-1507679799987-c73779587ccf?w=800"],
        "sizes": ["46", "48", "50", "52"],
        "colors": ["Navy"],
        "category": "men",
        "featured": True,
    },
    {
        "name": "Leather Chelsea Boots",
        "slug": "leather-chelsea-boots",
        "description": "Hand-finished calf leather boots.",
        "price": 640.0,
        "stock": 0,
        "images": ["https://images.unsplash.com/photo-1638247025967-b4e38f787b76?w=800"],
        "sizes": ["41", "42", "43", "44"],
        "colors": ["Brown", "Black"],
        "category": "men",
        "featured": False,
    },
    {
        "name": "Quilted Leather Handbag",
        "slug": "quilted-leather-handbag",
        "description": "Lambskin shoulder bag with a gold-tone chain.",
        "price": 1480.0,
        "stock": 5,
        "images": ["https://images.unsplash.com/photo-1584917865442-de89df76afd3?w=800"],
        "sizes": [],
        "colors": ["Black", "Ivory"],
        "category": "accessories",
        "featured": True,
    },
    {
        "name": "Silk Twill Scarf",
        "slug": "silk-twill-scarf",
        "description": "Hand-rolled silk twill scarf, 90 x 90 cm.",
        "price": 320.0,
        "stock": 30,
        "images": ["https://images.unsplash.com/photo-1601924994987-69e26d50dc26?w=800"],
        "sizes": [],
        "colors": [],
        "category": "accessories",
        "featured": False,
    },
]


def seed_catalog(session: Session, force: bool = False) -> Tuple[int, int]:
    """Returns (categories_inserted, products_inserted). Existing products are kept unless force."""
    if session.exec(select(Product)).first() is not None and not force:
        return 0, 0
    if force:
        for model in (CartItem, BrowsingHistory, ProductRecommendation, OrderItem, Product):
            session.execute(delete(model))
        session.commit()

    cats: Dict[str, Category] = {c.slug: c for c in session.exec(select(Category)).all()}
    new_cats = 0
    for c in SAMPLE_CATEGORIES:
        if c["slug"] not in cats:
            cats[c["slug"]] = Category(**c)
            session.add(cats[c["slug"]])
            new_cats += 1

    for p in SAMPLE_PRODUCTS:
        data = {k: v for k, v in p.items() if k != "category"}
        session.add(Product(**data, category_id=cats[p["category"]].id))
    session.commit()
    return new_cats, len(SAMPLE_PRODUCTS)
