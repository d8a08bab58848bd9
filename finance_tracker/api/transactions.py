from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.engine import Connection

from finance_tracker.api.deps import (
    ALL_ROLES,
    WRITE_ROLES,
    get_connection,
    require_roles,
)
from finance_tracker.domain.entities import Identity
from finance_tracker.dtos import (
    MessageResponse,
    TransactionCreateRequest,
    TransactionEnvelope,
    TransactionFilters,
    TransactionListResponse,
    TransactionUpdateRequest,
)
from finance_tracker.middleware.rate_limit import transaction_limiter
from finance_tracker.services.transaction_service import TransactionService

router = APIRouter(
    prefix="/transactions",
    tags=["Transactions"],
    dependencies=[Depends(transaction_limiter)],
)


@router.get("", response_model=TransactionListResponse)
def list_transactions(
    category: Optional[str] = Query(default=None, description="Exact category"),
    description: Optional[str] = Query(
        default=None, description="Case-insensitive substring of the description"
    ),
    start_date: Optional[date] = Query(default=None, alias="startDate"),
    end_date: Optional[date] = Query(default=None, alias="endDate"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    identity: Identity = Depends(require_roles(*ALL_ROLES)),
    conn: Connection = Depends(get_connection, scope="function"),
):
    """List transactions newest first; non-admins only see their own."""
    filters = TransactionFilters(
        category=category,
        description=description,
        start_date=start_date,
        end_date=end_date,
        page=page,
        limit=limit,
    )
    service = TransactionService(conn)
    return service.list_transactions(identity, filters)


@router.post(
    "",
    response_model=TransactionEnvelope,
    status_code=status.HTTP_201_CREATED,
)
def create_transaction(
    payload: TransactionCreateRequest,
    identity: Identity = Depends(require_roles(*WRITE_ROLES)),
    conn: Connection = Depends(get_connection, scope="function"),
):
    service = TransactionService(conn)
    return service.create(identity, payload)


@router.patch("/{transaction_id}", response_model=TransactionEnvelope)
def update_transaction(
    payload: TransactionUpdateRequest,
    transaction_id: int = Path(..., description="Transaction id"),
    identity: Identity = Depends(require_roles(*WRITE_ROLES)),
    conn: Connection = Depends(get_connection, scope="function"),
):
    """Change a transaction owned by the caller (any transaction for admins)."""
    service = TransactionService(conn)
    return service.update(identity, transaction_id, payload)


@router.delete("/{transaction_id}", response_model=MessageResponse)
def delete_transaction(
    transaction_id: int = Path(..., description="Transaction id"),
    identity: Identity = Depends(require_roles(*WRITE_ROLES)),
    conn: Connection = Depends(get_connection, scope="function"),
):
    service = TransactionService(conn)
    return service.delete(identity, transaction_id)
