# =============================================
# File: tests/test_seeding.py
# =============================================
import sys, os
sys.path.append(os.path.dirname(os.path.dirname(__file__)))

from sqlmodel import select

from app.db.models import Category, Product
from app.services.admin import grant_role, is_admin
from app.services.seeding import SAMPLE_PRODUCTS, seed_catalog

def test_seed_is_idempotent_unless_forced(session):
    cats, prods = seed_catalog(session)
    assert (cats, prods) == (3, len(SAMPLE_PRODUCTS))
    assert seed_catalog(session) == (0, 0)

    cats, prods = seed_catalog(session, force=True)
    assert cats == 0  # categories are reused
    assert prods == len(SAMPLE_PRODUCTS)
    assert len(session.exec(select(Product)).all()) == len(SAMPLE_PRODUCTS)
    assert len(session.exec(select(Category)).all()) == 3

def test_seeded_catalog_is_browsable(client, session):
    seed_catalog(session)
    r = client.get("/products", params={"category": "accessories"})
    assert sorted(p["slug"] for p in r.json()) == ["quilted-leather-handbag", "silk-twill-scarf"]

def test_grant_admin_role_once(session):
    grant_role(session, "boss")
    grant_role(session, "boss")
    assert is_admin(session, "boss")
    assert not is_admin(session, "someone-else")
