# =============================================
# File: tests/test_catalog.py
# Purpose: Category filter, featured listing, product detail and browsing-history tracking
# =============================================
import sys, os
sys.path.append(os.path.dirname(os.path.dirname(__file__)))

from sqlmodel import select

from app.db.models import BrowsingHistory
from app.services.catalog import stock_badge


def test_categories_sorted_by_name(client, catalog):
    r = client.get("/categories")
    assert r.status_code == 200
    assert [c["slug"] for c in r.json()] == ["accessories", "men", "women"]


def test_filter_by_category_slug_returns_only_matching(client, catalog):
    r = client.get("/products", params={"category": "women"})
    assert r.status_code == 200
    data = r.json()
    assert [p["slug"] for p in data] == ["silk-gown"]
    assert all(p["category_id"] == catalog["women"] for p in data)
    assert data[0]["category_name"] == "Women"


def test_unknown_category_slug_leaves_listing_unfiltered(client, catalog):
    r = client.get("/products", params={"category": "kids"})
    assert r.status_code == 200
    assert len(r.json()) == 3


def test_featured_products(client, catalog):
    r = client.get("/products/featured")
    assert r.status_code == 200
    assert sorted(p["slug"] for p in r.json()) == ["silk-gown", "silk-scarf"]


def test_product_detail_and_stock_badge(client, catalog):
    r = client.get("/products/silk-scarf")
    assert r.status_code == 200
    body = r.json()
    assert body["name"] == "Silk Scarf"
    assert body["category_name"] == "Accessories"
    assert body["stock_badge"] == "out_of_stock"


def test_unknown_product_is_404(client, catalog):
    r = client.get("/products/nope")
    assert r.status_code == 404


def test_signed_in_view_is_recorded(client, session, catalog, auth_headers):
    r = client.get("/products/silk-gown", headers=auth_headers("u-view"))
    assert r.status_code == 200
    rows = session.exec(select(BrowsingHistory).where(BrowsingHistory.user_id == "u-view")).all()
    assert [h.product_id for h in rows] == [catalog["silk-gown"]]


def test_anonymous_view_is_not_recorded(client, session, catalog):
    r = client.get("/products/silk-gown")
    assert r.status_code == 200
    assert session.exec(select(BrowsingHistory)).all() == []


def test_invalid_token_is_rejected(client, catalog):
    r = client.get("/products/silk-gown", headers={"Authorization": "Bearer not-a-jwt"})
    assert r.status_code == 401


def test_stock_badge_thresholds():
    assert stock_badge(0) == "out_of_stock"
    assert stock_badge(1) == "low_stock"
    assert stock_badge(9) == "low_stock"
    assert stock_badge(10) is None
