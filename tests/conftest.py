"""
Shared pytest fixtures: an in-memory database per test, a logged-in user,
and an OpenAI client stub behind a real DebateEngine.
"""
import os

# Must be set before core.database is imported anywhere.
os.environ["DATABASE_URL"] = "sqlite:///:memory:"

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import models  # noqa: F401  (registers tables)
import schemas
from core.database import Base
from core.notifications import Notifier
from crud import user as crud_user
from services.debate_engine import DebateEngine
from services.debate_room import DebateContext, DebateRoomState


def completion(text: str):
    """Shape of a non-streaming chat.completions.create() result."""
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=text))])


@pytest.fixture
def db_engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(bind=eng)
    yield eng
    Base.metadata.drop_all(bind=eng)
    eng.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(bind=db_engine, autoflush=False, future=True, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def user(db):
    return crud_user.create_user(
        db, schemas.UserCreate(username="ada", email="ada@example.com", password="s3cret!")
    )


@pytest.fixture
def openai_client():
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=completion("AI argument."))
    return client


@pytest.fixture
def engine(openai_client):
    return DebateEngine(openai_client)


@pytest.fixture
def ctx(db, user, engine):
    return DebateContext(db=db, user=user, notifier=Notifier(), engine=engine)


@pytest.fixture
def state(ctx):
    return DebateRoomState(ctx)


@pytest.fixture
def make_room(state):
    def _make(**overrides):
        fields = {"title": "AI in class", "topic": "AI should replace teachers", "mode": "ai_vs_user"}
        fields.update(overrides)
        return state.create_debate_room(schemas.DebateRoomCreate(**fields))
    return _make
