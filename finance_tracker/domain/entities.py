"""Domain enums and records shared by services, repositories and DTOs."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Mapping, Optional


class Role(str, Enum):
    ADMIN = "admin"
    USER = "user"
    READ_ONLY = "read-only"

    @classmethod
    def parse(cls, value: Any) -> Optional["Role"]:
        """Return the matching role, or None for anything outside the enum."""
        if isinstance(value, cls):
            return value
        for role in cls:
            if role.value == value:
                return role
        return None


class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class CategoryType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"
    BOTH = "both"


@dataclass(frozen=True)
class Identity:
    """Verified caller identity attached to a request after token validation."""

    user_id: int
    role: Role
    email: Optional[str] = None


@dataclass
class UserRecord:
    id: int
    email: str
    username: str
    password_hash: str
    role: Role
    created_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "UserRecord":
        return cls(
            id=row["id"],
            email=row["email"],
            username=row["username"],
            password_hash=row["password_hash"],
            role=Role(row["role"]),
            created_at=row.get("created_at"),
        )


@dataclass
class TransactionRecord:
    id: int
    user_id: int
    amount: Decimal
    type: TransactionType
    category: str
    date: date
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "TransactionRecord":
        return cls(
            id=row["id"],
            user_id=row["user_id"],
            amount=Decimal(str(row["amount"])),
            type=TransactionType(row["type"]),
            category=row["category"],
            date=row["date"],
            description=row.get("description"),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )
