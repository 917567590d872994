"""Database base class and async engine helpers."""

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""


def create_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """Create an async engine for the given database URL."""
    return create_async_engine(database_url, echo=echo)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create a session factory bound to the engine.

    Objects stay usable after commit so they can be converted to
    schemas once the session is closed.
    """
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
