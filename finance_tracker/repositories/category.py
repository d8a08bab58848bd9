"""Repository for the seeded category reference data."""

from typing import List

from sqlalchemy import select
from sqlalchemy.engine import Connection

from finance_tracker.database.schema import categories
from finance_tracker.domain.entities import CategoryType


class CategoryRepository:
    def __init__(self, conn: Connection):
        self.conn = conn

    def list_all(self) -> List[dict]:
        stmt = select(categories).order_by(categories.c.name)
        return [dict(row) for row in self.conn.execute(stmt).mappings()]

    def ensure(self, name: str, category_type: CategoryType) -> bool:
        """Insert the category unless a row with that name exists. Returns True if inserted."""
        existing = self.conn.execute(
            select(categories.c.id).where(categories.c.name == name)
        ).first()
        if existing:
            return False
        self.conn.execute(
            categories.insert().values(name=name, type=category_type.value)
        )
        return True


__all__ = ["CategoryRepository"]
