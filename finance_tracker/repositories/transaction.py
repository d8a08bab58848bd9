"""Repository for transactions."""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy.engine import Connection

from finance_tracker.database.schema import transactions
from finance_tracker.domain.entities import TransactionRecord
from finance_tracker.repositories.base import BaseRepository
from finance_tracker.repositories.filters import PredicateBuilder


class TransactionRepository(BaseRepository[TransactionRecord]):
    def __init__(self, conn: Connection):
        super().__init__(conn, transactions, TransactionRecord.from_row)

    def create(self, user_id: int, values: Dict[str, Any]) -> TransactionRecord:
        return self.insert_one({**values, "user_id": user_id})

    def update_fields(
        self, transaction_id: int, values: Dict[str, Any]
    ) -> Optional[TransactionRecord]:
        if values:
            values = {**values, "updated_at": datetime.now(timezone.utc)}
        return self.update(transaction_id, values)

    def page(
        self, filters: PredicateBuilder, offset: int, limit: int
    ) -> List[TransactionRecord]:
        """One page ordered newest first; id breaks ties so pages never overlap."""
        return self.find_many(
            filters,
            order_by=[transactions.c.date.desc(), transactions.c.id.desc()],
            offset=offset,
            limit=limit,
        )


__all__ = ["TransactionRepository"]
