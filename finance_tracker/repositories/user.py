"""Repository for users."""

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.engine import Connection

from finance_tracker.database.schema import users
from finance_tracker.domain.entities import Role, UserRecord
from finance_tracker.repositories.base import BaseRepository


class UserRepository(BaseRepository[UserRecord]):
    def __init__(self, conn: Connection):
        super().__init__(conn, users, UserRecord.from_row)

    def find_by_email(self, email: str) -> Optional[UserRecord]:
        return self._first(select(users).where(users.c.email == email))

    def email_exists(self, email: str) -> bool:
        stmt = select(users.c.id).where(users.c.email == email).limit(1)
        return self.conn.execute(stmt).first() is not None

    def create(
        self, email: str, username: str, password_hash: str, role: Role
    ) -> UserRecord:
        return self.insert_one(
            {
                "email": email,
                "username": username,
                "password_hash": password_hash,
                "role": role.value,
            }
        )

    def list_all(self) -> List[UserRecord]:
        return self.find_many(order_by=[users.c.id])

    def update_role(self, user_id: int, role: Role) -> Optional[UserRecord]:
        return self.update(user_id, {"role": role.value})


__all__ = ["UserRepository"]
