"""User administration endpoints (admin only)."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Path
from sqlalchemy.engine import Connection

from finance_tracker.api.deps import get_connection, require_admin
from finance_tracker.domain.entities import Identity
from finance_tracker.dtos import RoleUpdateRequest, UserEnvelope, UserListResponse
from finance_tracker.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/profile", response_model=UserListResponse)
def list_users(
    _admin: Identity = Depends(require_admin),
    conn: Connection = Depends(get_connection, scope="function"),
):
    service = UserService(conn)
    return service.list_users()


@router.put("/profile/{user_id}", response_model=UserEnvelope)
def update_user_role(
    payload: RoleUpdateRequest,
    user_id: int = Path(..., description="User id"),
    _admin: Identity = Depends(require_admin),
    conn: Connection = Depends(get_connection, scope="function"),
):
    """Change another account's role."""
    service = UserService(conn)
    return service.update_role(user_id, payload.role)
