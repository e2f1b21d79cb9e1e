# core/database.py
# Central SQLAlchemy setup: engine, SessionLocal, Base
# All models across the app must import THIS Base.

import os
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, declarative_base

# Use environment variable for DATABASE_URL; sqlite for local dev
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./app.db")


def make_engine(url: str = DATABASE_URL):
    """Build an engine for `url`; SQLite gets the dev pragmas and thread flag."""
    # For SQLite + multithreaded FastAPI, set check_same_thread=False
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    eng = create_engine(url, echo=False, future=True, connect_args=connect_args)

    # WAL reduces writer blocks on readers; in-memory databases have no journal file
    if url.startswith("sqlite") and ":memory:" not in url:
        @event.listens_for(eng, "connect")
        def set_sqlite_pragma(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA journal_mode=WAL;")
            cursor.execute("PRAGMA synchronous=NORMAL;")
            cursor.close()

    return eng


# Create the SQLAlchemy engine
engine = make_engine()

# Create session factory
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    future=True,
    expire_on_commit=False,
)

# Base class for all models
Base = declarative_base()


def init_db(bind=None):
    """Create tables (dev only; use a migration tool in prod)."""
    # models must be imported so they register on Base.metadata
    import models  # noqa: F401
    Base.metadata.create_all(bind=bind or engine)


# Dependency for FastAPI routes
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
