"""Connection pool lifecycle and per-request connection dependency."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterator

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.pool import StaticPool

from finance_tracker.config import Settings
from finance_tracker.database.schema import metadata

logger = logging.getLogger(__name__)


def create_db_engine(settings: Settings) -> Engine:
    """
    Build the pooled engine used by the whole process.
    In-memory SQLite shares a single connection so every request sees the same data.
    """
    url = settings.DATABASE_URL
    kwargs: Dict[str, Any] = {"echo": settings.DB_ECHO}

    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if ":memory:" in url or url.rstrip("/") == "sqlite:":
            kwargs["poolclass"] = StaticPool
    else:
        kwargs.update(
            pool_size=settings.DB_POOL_SIZE,
            pool_timeout=settings.DB_POOL_TIMEOUT,
            pool_recycle=settings.DB_POOL_RECYCLE,
            pool_pre_ping=True,
        )

    return create_engine(url, **kwargs)


def init_database(engine: Engine) -> None:
    """Create any missing tables."""
    metadata.create_all(engine)
    logger.info("Database schema ready", extra={"dialect": engine.dialect.name})


def dispose_engine(engine: Engine) -> None:
    engine.dispose()
    logger.info("Database connection pool closed")


def ping(engine: Engine) -> None:
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))


def get_engine(request: Request) -> Engine:
    """FastAPI dependency returning the engine attached at startup."""
    return request.app.state.engine


def get_connection(request: Request) -> Iterator[Connection]:
    """FastAPI dependency that yields a connection inside a transaction.

    Declare it with `scope="function"` so the commit runs before the response
    is sent and a failed commit reaches the exception handlers.
    """
    engine: Engine = request.app.state.engine
    with engine.begin() as conn:
        yield conn
