from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from jose import JWTError, jwt
from sqlalchemy.engine import Connection
from sqlalchemy.exc import IntegrityError
from werkzeug.security import check_password_hash, generate_password_hash

from finance_tracker.config import Settings
from finance_tracker.core.exceptions import InvalidTokenError, ValidationError
from finance_tracker.domain.entities import Identity, Role, UserRecord
from finance_tracker.dtos.auth import AuthResponse, LoginRequest, RegisterRequest
from finance_tracker.dtos.user import UserResponse
from finance_tracker.repositories.user import UserRepository

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"
ALREADY_REGISTERED = "User already registered"

# Checked against when the email is unknown so both failure paths do the same work.
_DUMMY_PASSWORD_HASH = generate_password_hash("not-a-real-password")


class AuthService:
    def __init__(self, conn: Connection, settings: Settings):
        self.conn = conn
        self.settings = settings
        self.user_repo = UserRepository(conn)

    def register(self, payload: RegisterRequest) -> AuthResponse:
        """Create an account and sign the caller in."""
        if self.user_repo.email_exists(payload.email):
            logger.warning("Registration rejected: email already registered")
            raise ValidationError(ALREADY_REGISTERED)

        role = Role.parse(payload.role) or Role.USER
        try:
            user = self.user_repo.create(
                email=payload.email,
                username=payload.username,
                password_hash=hash_password(payload.password),
                role=role,
            )
        except IntegrityError:
            # Lost a race with a concurrent registration for the same email.
            raise ValidationError(ALREADY_REGISTERED)

        logger.info("User registered", extra={"user_id": user.id, "role": user.role.value})
        return self._issue(user)

    def login(self, payload: LoginRequest) -> AuthResponse:
        user = self.user_repo.find_by_email(payload.email)
        if user is None:
            check_password_hash(_DUMMY_PASSWORD_HASH, payload.password)
            logger.warning("Login rejected: invalid credentials")
            raise ValidationError(INVALID_CREDENTIALS)

        if not verify_password(user.password_hash, payload.password):
            logger.warning("Login rejected: invalid credentials")
            raise ValidationError(INVALID_CREDENTIALS)

        logger.info("User logged in", extra={"user_id": user.id})
        return self._issue(user)

    def _issue(self, user: UserRecord) -> AuthResponse:
        token = create_access_token(user, self.settings)
        return AuthResponse(user=UserResponse.from_record(user), token=token)


def hash_password(password: str) -> str:
    """Salted hash; the random per-password salt is embedded in the returned string."""
    return generate_password_hash(password)


def verify_password(password_hash: str, password: str) -> bool:
    return check_password_hash(password_hash, password)


def create_access_token(
    user: UserRecord,
    settings: Settings,
    expires_delta: Optional[timedelta] = None,
) -> str:
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    now = datetime.now(timezone.utc)
    payload: dict[str, Any] = {
        "sub": str(user.id),
        "userId": user.id,
        "email": user.email,
        "role": user.role.value,
        "iat": now,
        "exp": now + expires_delta,
        "type": "access",
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str, settings: Settings) -> Identity:
    """Verify signature and expiry, returning the caller identity or raising InvalidTokenError."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as e:
        logger.info("Token rejected", extra={"reason": str(e)})
        raise InvalidTokenError("Forbidden")

    if payload.get("type") != "access":
        raise InvalidTokenError("Forbidden")

    role = Role.parse(payload.get("role"))
    user_id = payload.get("userId")
    if role is None or not isinstance(user_id, int):
        raise InvalidTokenError("Forbidden")

    return Identity(user_id=user_id, role=role, email=payload.get("email"))
