"""Role-scoped aggregates behind the dashboard charts."""

import calendar
from datetime import date
from typing import Callable, Optional

from sqlalchemy.engine import Connection

from finance_tracker.database.schema import transactions
from finance_tracker.domain.entities import Identity
from finance_tracker.dtos import (
    CategoryBreakdownEntry,
    CategoryBreakdownResponse,
    MonthlyAnalyticsEntry,
    MonthlyAnalyticsResponse,
    TrendPoint,
    TrendsResponse,
)
from finance_tracker.repositories.analytics import AnalyticsRepository
from finance_tracker.repositories.filters import PredicateBuilder

TREND_WINDOW_MONTHS = 12


def months_before(day: date, months: int) -> date:
    """Same day `months` calendar months earlier, clamped to the end of shorter months."""
    index = day.year * 12 + (day.month - 1) - months
    year, month = divmod(index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def percentage_shares(amounts: list[float]) -> list[float]:
    total = sum(amounts)
    if total <= 0:
        return [0.0 for _ in amounts]
    return [round(amount / total * 100, 2) for amount in amounts]


class AnalyticsService:
    def __init__(self, conn: Connection, today: Callable[[], date] = date.today):
        self.conn = conn
        self.analytics_repo = AnalyticsRepository(conn)
        self._today = today

    def monthly(self, identity: Identity, year: Optional[int] = None) -> MonthlyAnalyticsResponse:
        """Income and expense totals per calendar month of `year` (default: current year)."""
        if year is None:
            year = self._today().year

        rows = self.analytics_repo.monthly_totals(self._scope(identity), year)
        months = []
        for row in rows:
            income = float(row["income"] or 0)
            expense = float(row["expense"] or 0)
            months.append(
                MonthlyAnalyticsEntry(
                    month=row["month"], income=income, expense=expense, net=income - expense
                )
            )
        return MonthlyAnalyticsResponse(months=months)

    def category_breakdown(
        self,
        identity: Identity,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> CategoryBreakdownResponse:
        scope = (
            self._scope(identity)
            .on_or_after(transactions.c.date, start_date)
            .on_or_before(transactions.c.date, end_date)
        )
        rows = self.analytics_repo.expense_by_category(scope)

        amounts = [float(row["amount"] or 0) for row in rows]
        shares = percentage_shares(amounts)
        categories = [
            CategoryBreakdownEntry(
                category=row["category"],
                amount=amount,
                percentage=share,
                count=int(row["count"]),
            )
            for row, amount, share in zip(rows, amounts, shares)
        ]
        return CategoryBreakdownResponse(categories=categories)

    def trends(self, identity: Identity) -> TrendsResponse:
        """Per-month income and expense sums over the trailing twelve months."""
        since = months_before(self._today(), TREND_WINDOW_MONTHS)
        rows = self.analytics_repo.totals_by_period_and_type(self._scope(identity), since)
        return TrendsResponse(
            trends=[
                TrendPoint(period=row["period"], type=row["type"], value=float(row["value"] or 0))
                for row in rows
            ]
        )

    def _scope(self, identity: Identity) -> PredicateBuilder:
        return PredicateBuilder().owned_by(transactions.c.user_id, identity)
