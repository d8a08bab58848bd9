"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.engine import Engine

from finance_tracker.api import analytics, auth, categories, health, transactions, users
from finance_tracker.config import Settings, get_settings
from finance_tracker.core.error_handlers import register_exception_handlers
from finance_tracker.core.logging import setup_logging
from finance_tracker.database.engine import create_db_engine, dispose_engine, init_database
from finance_tracker.middleware.rate_limit import create_rate_limit_store
from finance_tracker.middleware.request_logging import RequestLoggingMiddleware

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    engine: Optional[Engine] = None,
    configure_logging: bool = True,
) -> FastAPI:
    """
    Build the API. A caller-supplied engine stays owned by the caller and is
    not disposed on shutdown.
    """
    settings = settings or get_settings()
    if configure_logging:
        setup_logging(settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owns_engine = engine is None
        db_engine = engine if engine is not None else create_db_engine(settings)
        init_database(db_engine)
        app.state.engine = db_engine
        logger.info("Application started", extra={"app_version": settings.APP_VERSION})
        try:
            yield
        finally:
            if owns_engine:
                dispose_engine(db_engine)
            logger.info("Application stopped")

    app = FastAPI(
        title=settings.APP_NAME,
        description="Personal finance tracker: transactions, role-gated analytics and user administration",
        version=settings.APP_VERSION,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.rate_limit_store = create_rate_limit_store(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Trace middleware for request logging and correlation
    app.add_middleware(RequestLoggingMiddleware)

    register_exception_handlers(app)

    app.include_router(health.router, prefix="/api", tags=["Health"])
    app.include_router(auth.router, prefix="/api")
    app.include_router(transactions.router, prefix="/api")
    app.include_router(analytics.router, prefix="/api")
    app.include_router(users.router, prefix="/api")
    app.include_router(categories.router, prefix="/api")

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "message": "Personal Finance Tracker API",
            "version": settings.APP_VERSION,
            "docs": "/api/docs",
        }

    return app


app = create_app()
