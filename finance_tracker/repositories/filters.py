"""Conjunctive WHERE-clause builder for optional filters.

Every predicate is a SQLAlchemy expression, so user input only ever reaches the
database as a bound parameter. Filters whose value is missing are skipped,
which keeps the "include the clause only when the input is present" behaviour
of the list and analytics endpoints in one place.
"""

from __future__ import annotations

from datetime import date
from typing import Any, List, Optional

from sqlalchemy.sql import ColumnElement, Select
from sqlalchemy.sql.schema import Column

from finance_tracker.domain.entities import Identity, Role


class PredicateBuilder:
    def __init__(self) -> None:
        self._clauses: List[ColumnElement[bool]] = []

    def __len__(self) -> int:
        return len(self._clauses)

    @property
    def clauses(self) -> List[ColumnElement[bool]]:
        return list(self._clauses)

    def add(self, clause: ColumnElement[bool]) -> "PredicateBuilder":
        self._clauses.append(clause)
        return self

    def equals(self, column: Column, value: Any) -> "PredicateBuilder":
        if _present(value):
            self._clauses.append(column == value)
        return self

    def contains_ci(self, column: Column, value: Optional[str]) -> "PredicateBuilder":
        """Case-insensitive substring match; `%` and `_` in the input match literally."""
        if _present(value):
            self._clauses.append(column.icontains(value, autoescape=True))
        return self

    def on_or_after(self, column: Column, value: Optional[date]) -> "PredicateBuilder":
        if value is not None:
            self._clauses.append(column >= value)
        return self

    def on_or_before(self, column: Column, value: Optional[date]) -> "PredicateBuilder":
        if value is not None:
            self._clauses.append(column <= value)
        return self

    def owned_by(self, owner_column: Column, identity: Identity) -> "PredicateBuilder":
        """Scope rows to the caller unless the caller may see every user's data."""
        if identity.role is Role.ADMIN:
            return self
        if identity.role is Role.USER or identity.role is Role.READ_ONLY:
            self._clauses.append(owner_column == identity.user_id)
            return self
        raise ValueError(f"Unhandled role: {identity.role!r}")

    def where(self, stmt: Select) -> Select:
        if not self._clauses:
            return stmt
        return stmt.where(*self._clauses)


def _present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str) and not value.strip():
        return False
    return True
