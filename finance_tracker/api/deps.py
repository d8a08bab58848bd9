"""Common dependency aliases for API endpoints."""

from finance_tracker.config import get_request_settings
from finance_tracker.database.engine import get_connection, get_engine
from finance_tracker.middleware.auth import (
    ADMIN_ONLY,
    ALL_ROLES,
    WRITE_ROLES,
    get_current_identity,
    require_admin,
    require_roles,
)

__all__ = [
    "ADMIN_ONLY",
    "ALL_ROLES",
    "WRITE_ROLES",
    "get_connection",
    "get_current_identity",
    "get_engine",
    "get_request_settings",
    "require_admin",
    "require_roles",
]
