"""Base repository providing common CRUD helpers over SQLAlchemy Core tables."""

from typing import Any, Callable, Dict, Generic, List, Mapping, Optional, TypeVar

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.engine import Connection
from sqlalchemy.sql import Select
from sqlalchemy.sql.schema import Table

from finance_tracker.repositories.filters import PredicateBuilder

T = TypeVar("T")


class BaseRepository(Generic[T]):
    """Base repository bound to one table and one open connection."""

    def __init__(
        self,
        conn: Connection,
        table: Table,
        from_row: Callable[[Mapping[str, Any]], T],
    ):
        self.conn = conn
        self.table = table
        self._from_row = from_row

    def find_by_id(self, entity_id: int) -> Optional[T]:
        stmt = select(self.table).where(self.table.c.id == entity_id)
        return self._first(stmt)

    def find_many(
        self,
        filters: Optional[PredicateBuilder] = None,
        order_by: Optional[List[Any]] = None,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> List[T]:
        stmt = select(self.table)
        if filters is not None:
            stmt = filters.where(stmt)
        if order_by:
            stmt = stmt.order_by(*order_by)
        if offset:
            stmt = stmt.offset(offset)
        if limit:
            stmt = stmt.limit(limit)
        rows = self.conn.execute(stmt).mappings().all()
        return [self._from_row(row) for row in rows]

    def count(self, filters: Optional[PredicateBuilder] = None) -> int:
        stmt = select(func.count()).select_from(self.table)
        if filters is not None:
            stmt = filters.where(stmt)
        return int(self.conn.execute(stmt).scalar_one())

    def insert_one(self, values: Dict[str, Any]) -> T:
        stmt = insert(self.table).values(**values).returning(*self.table.c)
        row = self.conn.execute(stmt).mappings().one()
        return self._from_row(row)

    def update(self, entity_id: int, values: Dict[str, Any]) -> Optional[T]:
        if not values:
            return self.find_by_id(entity_id)
        stmt = (
            update(self.table)
            .where(self.table.c.id == entity_id)
            .values(**values)
            .returning(*self.table.c)
        )
        row = self.conn.execute(stmt).mappings().first()
        return self._from_row(row) if row else None

    def delete(self, entity_id: int) -> bool:
        result = self.conn.execute(delete(self.table).where(self.table.c.id == entity_id))
        return result.rowcount > 0

    def _first(self, stmt: Select) -> Optional[T]:
        row = self.conn.execute(stmt).mappings().first()
        return self._from_row(row) if row else None
