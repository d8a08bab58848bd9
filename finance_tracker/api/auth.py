from fastapi import APIRouter, Depends, status
from sqlalchemy.engine import Connection

from finance_tracker.api.deps import (
    ALL_ROLES,
    get_connection,
    get_request_settings,
    require_roles,
)
from finance_tracker.config import Settings
from finance_tracker.domain.entities import Identity
from finance_tracker.dtos import AuthResponse, LoginRequest, RegisterRequest, UserEnvelope
from finance_tracker.middleware.rate_limit import auth_limiter
from finance_tracker.services.auth_service import AuthService
from finance_tracker.services.user_service import UserService

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(auth_limiter)],
)
def register(
    payload: RegisterRequest,
    conn: Connection = Depends(get_connection, scope="function"),
    settings: Settings = Depends(get_request_settings),
):
    """Create an account and return it together with a bearer token."""
    service = AuthService(conn, settings)
    return service.register(payload)


@router.post(
    "/login",
    response_model=AuthResponse,
    dependencies=[Depends(auth_limiter)],
)
def login(
    payload: LoginRequest,
    conn: Connection = Depends(get_connection, scope="function"),
    settings: Settings = Depends(get_request_settings),
):
    service = AuthService(conn, settings)
    return service.login(payload)


@router.get("/me", response_model=UserEnvelope)
def get_me(
    identity: Identity = Depends(require_roles(*ALL_ROLES)),
    conn: Connection = Depends(get_connection, scope="function"),
):
    """Return the account behind the presented token."""
    service = UserService(conn)
    return service.get_profile(identity)
