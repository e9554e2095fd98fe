"""
Database engine and session management.
"""
from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker
from sqlalchemy.pool import StaticPool

from gameframe.core.config import settings


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""


def make_engine(database_url: str):
    """
    Create an engine for the given URL.

    In-memory sqlite URLs share one connection so every session sees the
    same database.
    """
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, **kwargs)
    return create_engine(database_url, pool_pre_ping=True)


engine = make_engine(settings.DATABASE_URL)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


def init_db(bind=None) -> None:
    """Create all tables."""
    # Register the models on Base.metadata
    from gameframe import models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)

