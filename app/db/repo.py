# =============================================
# File: app/db/repo.py
# Purpose: DB repository bootstrap: configure engine from DB_URL (default SQLite), create tables and hand out per-request sessions.
# =============================================

from typing import Iterator
from sqlmodel import SQLModel, Session, create_engine
import os

from app.db import models  # noqa: F401  (registers tables on SQLModel.metadata)

DB_URL = os.getenv("DB_URL", "sqlite:///./luxeaura.db")

_connect_args = {"check_same_thread": False} if DB_URL.startswith("sqlite") else {}
engine = create_engine(DB_URL, echo=False, connect_args=_connect_args)


def init_db():
    SQLModel.metadata.create_all(engine)


def get_session() -> Iterator[Session]:
    """FastAPI dependency: one session per request."""
    with Session(engine) as session:
        yield session
