"""Dashboard analytics endpoints."""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.engine import Connection

from finance_tracker.api.deps import ALL_ROLES, get_connection, require_roles
from finance_tracker.domain.entities import Identity
from finance_tracker.dtos import (
    CategoryBreakdownResponse,
    MonthlyAnalyticsResponse,
    TrendsResponse,
)
from finance_tracker.middleware.rate_limit import analytics_limiter
from finance_tracker.services.analytics_service import AnalyticsService

router = APIRouter(
    prefix="/analytics",
    tags=["Analytics"],
    dependencies=[Depends(analytics_limiter)],
)


@router.get("/monthly", response_model=MonthlyAnalyticsResponse)
def get_monthly_analytics(
    year: Optional[int] = Query(default=None, ge=1900, le=9999),
    identity: Identity = Depends(require_roles(*ALL_ROLES)),
    conn: Connection = Depends(get_connection, scope="function"),
):
    """Income, expense and net per month of the requested year."""
    service = AnalyticsService(conn)
    return service.monthly(identity, year)


@router.get("/category", response_model=CategoryBreakdownResponse)
def get_category_breakdown(
    start_date: Optional[date] = Query(default=None, alias="startDate"),
    end_date: Optional[date] = Query(default=None, alias="endDate"),
    identity: Identity = Depends(require_roles(*ALL_ROLES)),
    conn: Connection = Depends(get_connection, scope="function"),
):
    """Expense totals per category with each category's share of the total."""
    service = AnalyticsService(conn)
    return service.category_breakdown(identity, start_date, end_date)


@router.get("/trends", response_model=TrendsResponse)
def get_income_expense_trends(
    identity: Identity = Depends(require_roles(*ALL_ROLES)),
    conn: Connection = Depends(get_connection, scope="function"),
):
    """Income vs expense per month over the trailing twelve months."""
    service = AnalyticsService(conn)
    return service.trends(identity)
