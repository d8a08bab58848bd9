"""Authentication and role-gate dependencies for FastAPI."""

from __future__ import annotations

from typing import Callable, Iterable, Optional

from fastapi import Depends, Header, Request

from finance_tracker.config import Settings, get_request_settings
from finance_tracker.core.exceptions import AuthenticationError, AuthorizationError
from finance_tracker.domain.entities import Identity, Role
from finance_tracker.services.auth_service import decode_access_token

ALL_ROLES = (Role.ADMIN, Role.USER, Role.READ_ONLY)
WRITE_ROLES = (Role.ADMIN, Role.USER)
ADMIN_ONLY = (Role.ADMIN,)


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer":
        return None
    return token.strip() or None


async def get_current_identity(
    request: Request,
    authorization: Optional[str] = Header(None),
    settings: Settings = Depends(get_request_settings),
) -> Identity:
    token = extract_bearer_token(authorization)
    if not token:
        raise AuthenticationError("Unauthorized")

    identity = decode_access_token(token, settings)
    request.state.identity = identity
    return identity


def check_role(identity: Optional[Identity], allowed: Iterable[Role]) -> Identity:
    if identity is None:
        raise AuthenticationError("User is not authenticated")
    if identity.role not in tuple(allowed):
        raise AuthorizationError("Forbidden: Not Valid Role")
    return identity


def require_roles(*allowed: Role) -> Callable[..., Identity]:
    """Dependency factory: verified identity whose role is in `allowed`."""

    async def dependency(
        request: Request,
        _identity: Identity = Depends(get_current_identity),
    ) -> Identity:
        return check_role(getattr(request.state, "identity", None), allowed)

    return dependency


require_admin = require_roles(*ADMIN_ONLY)
