"""
Health check endpoints
"""
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from finance_tracker.api.deps import get_engine
from finance_tracker.database.engine import ping

router = APIRouter()


@router.get("/health")
async def health_check():
    """Simple API health check."""
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": "Personal Finance Tracker API",
    }


@router.get("/health/db")
def database_health(engine: Engine = Depends(get_engine)):
    """Relational store health check."""
    try:
        ping(engine)
    except SQLAlchemyError as exc:  # pragma: no cover - reported as not ready
        return {
            "status": "unhealthy",
            "database": "disconnected",
            "error": exc.__class__.__name__,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    return {
        "status": "healthy",
        "database": "connected",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
