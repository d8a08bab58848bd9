"""User DTOs"""

from typing import Any, List

from pydantic import BaseModel

from finance_tracker.domain.entities import Role, UserRecord


class UserResponse(BaseModel):
    id: int
    email: str
    username: str
    role: Role

    @classmethod
    def from_record(cls, user: UserRecord) -> "UserResponse":
        return cls(id=user.id, email=user.email, username=user.username, role=user.role)


class UserEnvelope(BaseModel):
    user: UserResponse


class UserListResponse(BaseModel):
    users: List[UserResponse]


class RoleUpdateRequest(BaseModel):
    # Checked against Role by the service so an unknown value yields "Invalid role specified".
    role: Any
