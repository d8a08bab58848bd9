"""User administration (admin only) and profile lookup"""

import logging
from typing import Any

from sqlalchemy.engine import Connection

from finance_tracker.core.exceptions import NotFoundError, ValidationError
from finance_tracker.domain.entities import Identity, Role
from finance_tracker.dtos import UserEnvelope, UserListResponse, UserResponse
from finance_tracker.repositories.user import UserRepository

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, conn: Connection):
        self.conn = conn
        self.user_repo = UserRepository(conn)

    def list_users(self) -> UserListResponse:
        """List all users"""
        return UserListResponse(
            users=[UserResponse.from_record(u) for u in self.user_repo.list_all()]
        )

    def get_profile(self, identity: Identity) -> UserEnvelope:
        user = self.user_repo.find_by_id(identity.user_id)
        if user is None:
            raise NotFoundError("User not found")
        return UserEnvelope(user=UserResponse.from_record(user))

    def update_role(self, user_id: int, role_value: Any) -> UserEnvelope:
        role = Role.parse(role_value)
        if role is None:
            raise ValidationError("Invalid role specified")

        if self.user_repo.find_by_id(user_id) is None:
            raise NotFoundError("User not found")

        user = self.user_repo.update_role(user_id, role)
        if user is None:
            raise NotFoundError("User not found")

        logger.info("User role updated", extra={"user_id": user_id, "role": role.value})
        return UserEnvelope(user=UserResponse.from_record(user))
