# =============================================
# File: tests/conftest.py
# Purpose: Shared fixtures: in-memory DB wired into the app, auth tokens, sample catalog, fake AI gateway client
# =============================================
import sys, os
sys.path.append(os.path.dirname(os.path.dirname(__file__)))

from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlmodel import SQLModel, Session, create_engine
from sqlmodel.pool import StaticPool

from app.main import app
from app.db.repo import get_session
from app.db.models import Category, Product, Profile, UserRole


@pytest.fixture
def engine():
    eng = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    SQLModel.metadata.create_all(eng)
    yield eng
    SQLModel.metadata.drop_all(eng)


@pytest.fixture
def session(engine):
    with Session(engine) as s:
        yield s


@pytest.fixture
def client(engine):
    def _override():
        with Session(engine) as s:
            yield s
    app.dependency_overrides[get_session] = _override
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    def _make(user_id: str) -> dict:
        token = jwt.encode(
            {"sub": user_id, "aud": "authenticated"},
            os.getenv("AUTH_JWT_SECRET", "dev-secret-change"),
            algorithm="HS256",
        )
        return {"Authorization": f"Bearer {token}"}
    return _make


@pytest.fixture
def catalog(session):
    """Three products over three categories; returns {slug: product_id} plus category ids."""
    women = Category(name="Women", slug="women")
    men = Category(name="Men", slug="men")
    acc = Category(name="Accessories", slug="accessories")
    session.add_all([women, men, acc])
    gown = Product(name="Silk Gown", slug="silk-gown", description="Long silk gown.", price=100.0, stock=5,
                   images=["https://img.example/gown.jpg"], sizes=["S", "M"], colors=["Black", "Red"],
                   category_id=women.id, featured=True)
    blazer = Product(name="Wool Blazer", slug="wool-blazer", description="Tailored blazer.", price=250.5, stock=3,
                     images=["https://img.example/blazer.jpg"], category_id=men.id)
    scarf = Product(name="Silk Scarf", slug="silk-scarf", description="Square scarf.", price=40.0, stock=0,
                    category_id=acc.id, featured=True)
    session.add_all([gown, blazer, scarf])
    session.commit()
    return {
        "silk-gown": gown.id,
        "wool-blazer": blazer.id,
        "silk-scarf": scarf.id,
        "women": women.id,
        "men": men.id,
        "accessories": acc.id,
    }


@pytest.fixture
def make_admin(session):
    def _make(user_id: str, full_name: str = "Ada Admin", email: str = "ada@example.com") -> None:
        session.add(UserRole(user_id=user_id, role="admin"))
        session.add(Profile(id=user_id, full_name=full_name, email=email))
        session.commit()
    return _make


class FakeCompletions:
    def __init__(self, reply):
        self.reply = reply
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if isinstance(self.reply, Exception):
            raise self.reply
        return self.reply


def fake_ai_client(reply):
    """Stand-in for openai.OpenAI: only chat.completions.create is used."""
    completions = FakeCompletions(reply)
    return SimpleNamespace(chat=SimpleNamespace(completions=completions), completions=completions)


def text_reply(content: str) -> dict:
    return {"model": "fake", "choices": [{"message": {"role": "assistant", "content": content}}]}


@pytest.fixture
def fake_ai(monkeypatch):
    """Route every gateway call to a fake client; returns a setter for the reply."""
    from app.services import ai_client

    def _install(reply):
        fake = fake_ai_client(reply)
        monkeypatch.setattr(ai_client, "get_client", lambda: fake)
        return fake.completions
    return _install
