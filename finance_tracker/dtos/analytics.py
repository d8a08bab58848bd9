"""Analytics DTOs for dashboard charts"""

from typing import List

from pydantic import BaseModel

from finance_tracker.domain.entities import TransactionType


class MonthlyAnalyticsEntry(BaseModel):
    month: str
    income: float
    expense: float
    net: float


class MonthlyAnalyticsResponse(BaseModel):
    months: List[MonthlyAnalyticsEntry]


class CategoryBreakdownEntry(BaseModel):
    category: str
    amount: float
    percentage: float
    count: int


class CategoryBreakdownResponse(BaseModel):
    categories: List[CategoryBreakdownEntry]


class TrendPoint(BaseModel):
    period: str
    type: TransactionType
    value: float


class TrendsResponse(BaseModel):
    trends: List[TrendPoint]
