# =============================================
# File: tests/test_orders.py
# Purpose: Checkout from the cart and order history
# =============================================
import sys, os
sys.path.append(os.path.dirname(os.path.dirname(__file__)))

from app.db.models import Product


def test_checkout_empty_cart_is_rejected(client, catalog, auth_headers):
    r = client.post("/orders/checkout", headers=auth_headers("u-empty"))
    assert r.status_code == 400
    assert r.json()["detail"] == "Cart is empty"


def test_checkout_creates_order_clears_cart_and_takes_stock(client, session, catalog, auth_headers):
    h = auth_headers("u-buy")
    client.post("/cart", json={"product_id": catalog["silk-gown"], "quantity": 2, "size": "M", "color": "Red"}, headers=h)
    client.post("/cart", json={"product_id": catalog["wool-blazer"], "quantity": 1}, headers=h)

    r = client.post("/orders/checkout", headers=h)
    assert r.status_code == 201
    order = r.json()
    assert order["total"] == 450.5
    assert order["status"] == "pending"
    assert sorted((i["product_id"], i["quantity"], i["price"]) for i in order["items"]) == sorted([
        (catalog["silk-gown"], 2, 100.0),
        (catalog["wool-blazer"], 1, 250.5),
    ])

    assert client.get("/cart", headers=h).json()["items"] == []
    session.expire_all()
    assert session.get(Product, catalog["silk-gown"]).stock == 3
    assert session.get(Product, catalog["wool-blazer"]).stock == 2

    history = client.get("/orders", headers=h).json()
    assert [o["id"] for o in history] == [order["id"]]
    assert len(history[0]["items"]) == 2


def test_checkout_with_insufficient_stock(client, catalog, auth_headers):
    h = auth_headers("u-greedy")
    client.post("/cart", json={"product_id": catalog["wool-blazer"], "quantity": 4}, headers=h)
    r = client.post("/orders/checkout", headers=h)
    assert r.status_code == 400
    assert "Insufficient stock" in r.json()["detail"]
    # cart untouched
    assert client.get("/cart/count", headers=h).json() == {"count": 4}


def test_orders_are_private(client, catalog, auth_headers):
    h = auth_headers("u-a")
    client.post("/cart", json={"product_id": catalog["wool-blazer"]}, headers=h)
    client.post("/orders/checkout", headers=h)
    assert client.get("/orders", headers=auth_headers("u-b")).json() == []


def test_checkout_counts_stock_across_variants_of_one_product(client, session, catalog, auth_headers):
    h = auth_headers("u-variants")
    client.post("/cart", json={"product_id": catalog["silk-gown"], "quantity": 3, "size": "S", "color": "Red"}, headers=h)
    client.post("/cart", json={"product_id": catalog["silk-gown"], "quantity": 3, "size": "M", "color": "Red"}, headers=h)

    r = client.post("/orders/checkout", headers=h)
    assert r.status_code == 400
    assert "Insufficient stock" in r.json()["detail"]
    session.expire_all()
    assert session.get(Product, catalog["silk-gown"]).stock == 5
    assert client.get("/orders", headers=h).json() == []
