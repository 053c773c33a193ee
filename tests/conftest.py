"""
Pytest configuration for the companion API test suite.

Configures:
- an in-memory SQLite database shared through StaticPool
- a FastAPI TestClient with get_db and the answer generator overridden
"""
import os
import uuid

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from companion import models  # noqa: F401
from companion.core.db import Base
from companion.core.security import create_access_token
from companion.deps import get_db
from companion.main import app
from companion.models.build import Build
from companion.models.item import Item
from companion.models.user import User
from companion.services.knowledge import KnowledgeBase


class FakeGenerator:
    """Stands in for Gemini; records every prompt it receives."""

    def __init__(self, reply: str = "Stimpaks restore health.", error: Exception | None = None):
        self.reply = reply
        self.error = error
        self.prompts: list[str] = []

    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def db_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(bind=db_engine, autoflush=False, autocommit=False)


@pytest.fixture
def generator():
    return FakeGenerator()


@pytest.fixture
def client(session_factory, generator):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.state.knowledge_base = KnowledgeBase()
    app.state.answer_generator = generator
    yield TestClient(app)
    app.dependency_overrides.clear()


# =============================================================================
# Data helpers
# =============================================================================

def create_user(session_factory, role: str = "user", username: str | None = None) -> tuple[str, dict]:
    """Insert a user directly and return (user_id, auth headers)."""
    username = username or f"{role}_account"
    db = session_factory()
    try:
        user = User(username=username, email=f"{username}@example.com", role=role)
        db.add(user)
        db.commit()
        user_id = str(user.id)
    finally:
        db.close()
    token = create_access_token(user_id)
    return user_id, {"Authorization": f"Bearer {token}"}


def create_item(session_factory, name: str, **fields) -> str:
    fields.setdefault("type", "aid")
    fields.setdefault("category", "Medicine")
    db = session_factory()
    try:
        item = Item(name=name, **fields)
        db.add(item)
        db.commit()
        return str(item.id)
    finally:
        db.close()


def create_build(session_factory, author_id: str, name: str, **fields) -> str:
    fields.setdefault("level", 50)
    fields.setdefault("build_type", "PvE")
    db = session_factory()
    try:
        build = Build(name=name, author_id=uuid.UUID(author_id), **fields)
        db.add(build)
        db.commit()
        return str(build.id)
    finally:
        db.close()


@pytest.fixture
def regular_user(session_factory):
    return create_user(session_factory, role="user", username="vaultdweller")


@pytest.fixture
def guest_user(session_factory):
    return create_user(session_factory, role="guest", username="Guest_test")


@pytest.fixture
def admin_user(session_factory):
    return create_user(session_factory, role="admin", username="overseer")
