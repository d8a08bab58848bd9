"""Aggregate queries over transactions for the analytics endpoints."""

from datetime import date
from typing import Any, Dict, List

from sqlalchemy import case, extract, func, select
from sqlalchemy.engine import Connection

from finance_tracker.database.schema import transactions, year_month
from finance_tracker.domain.entities import TransactionType
from finance_tracker.repositories.filters import PredicateBuilder

t = transactions.c


class AnalyticsRepository:
    def __init__(self, conn: Connection):
        self.conn = conn

    def monthly_totals(self, scope: PredicateBuilder, year: int) -> List[Dict[str, Any]]:
        month = year_month(t.date).label("month")
        income = func.coalesce(
            func.sum(case((t.type == TransactionType.INCOME.value, t.amount), else_=0)), 0
        ).label("income")
        expense = func.coalesce(
            func.sum(case((t.type == TransactionType.EXPENSE.value, t.amount), else_=0)), 0
        ).label("expense")

        scope.add(extract("year", t.date) == year)
        stmt = scope.where(select(month, income, expense))
        stmt = stmt.group_by(year_month(t.date)).order_by(year_month(t.date))
        return [dict(row) for row in self.conn.execute(stmt).mappings()]

    def expense_by_category(self, scope: PredicateBuilder) -> List[Dict[str, Any]]:
        amount = func.sum(t.amount).label("amount")
        stmt = select(t.category, amount, func.count().label("count"))
        scope.add(t.type == TransactionType.EXPENSE.value)
        stmt = scope.where(stmt).group_by(t.category).order_by(amount.desc(), t.category)
        return [dict(row) for row in self.conn.execute(stmt).mappings()]

    def totals_by_period_and_type(
        self, scope: PredicateBuilder, since: date
    ) -> List[Dict[str, Any]]:
        period = year_month(t.date).label("period")
        stmt = select(period, t.type, func.sum(t.amount).label("value"))
        scope.on_or_after(t.date, since)
        stmt = (
            scope.where(stmt)
            .group_by(year_month(t.date), t.type)
            .order_by(year_month(t.date), t.type)
        )
        return [dict(row) for row in self.conn.execute(stmt).mappings()]


__all__ = ["AnalyticsRepository"]
