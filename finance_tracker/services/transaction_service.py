"""Transaction CRUD with ownership rules and filtered pagination."""

import logging
import math

from sqlalchemy.engine import Connection

from finance_tracker.core.exceptions import AuthorizationError, NotFoundError
from finance_tracker.database.schema import transactions
from finance_tracker.domain.entities import Identity, Role, TransactionRecord
from finance_tracker.dtos import (
    MessageResponse,
    TransactionCreateRequest,
    TransactionEnvelope,
    TransactionFilters,
    TransactionListResponse,
    TransactionResponse,
    TransactionUpdateRequest,
)
from finance_tracker.repositories.filters import PredicateBuilder
from finance_tracker.repositories.transaction import TransactionRepository

logger = logging.getLogger(__name__)


def can_create(identity: Identity) -> bool:
    if identity.role is Role.ADMIN or identity.role is Role.USER:
        return True
    if identity.role is Role.READ_ONLY:
        return False
    raise ValueError(f"Unhandled role: {identity.role!r}")


def can_modify(identity: Identity, owner_id: int) -> bool:
    """Admins may change any row, users only their own, read-only callers none."""
    if identity.role is Role.ADMIN:
        return True
    if identity.role is Role.USER:
        return owner_id == identity.user_id
    if identity.role is Role.READ_ONLY:
        return False
    raise ValueError(f"Unhandled role: {identity.role!r}")


def build_list_filters(identity: Identity, filters: TransactionFilters) -> PredicateBuilder:
    c = transactions.c
    return (
        PredicateBuilder()
        .owned_by(c.user_id, identity)
        .equals(c.category, filters.category)
        .contains_ci(c.description, filters.description)
        .on_or_after(c.date, filters.start_date)
        .on_or_before(c.date, filters.end_date)
    )


class TransactionService:
    def __init__(self, conn: Connection):
        self.conn = conn
        self.transaction_repo = TransactionRepository(conn)

    def create(
        self, identity: Identity, payload: TransactionCreateRequest
    ) -> TransactionEnvelope:
        if not can_create(identity):
            raise AuthorizationError(
                "Forbidden: You are not allowed to create transactions"
            )
        record = self.transaction_repo.create(identity.user_id, payload.to_values())
        logger.info(
            "Transaction created",
            extra={"transaction_id": record.id, "user_id": identity.user_id},
        )
        return TransactionEnvelope(transaction=TransactionResponse.from_record(record))

    def update(
        self,
        identity: Identity,
        transaction_id: int,
        payload: TransactionUpdateRequest,
    ) -> TransactionEnvelope:
        existing = self._get_modifiable(identity, transaction_id, "update")
        record = self.transaction_repo.update_fields(existing.id, payload.to_values())
        if record is None:
            # Deleted between the ownership check and the write.
            raise NotFoundError("Transaction not found")
        logger.info(
            "Transaction updated",
            extra={"transaction_id": record.id, "user_id": identity.user_id},
        )
        return TransactionEnvelope(transaction=TransactionResponse.from_record(record))

    def delete(self, identity: Identity, transaction_id: int) -> MessageResponse:
        existing = self._get_modifiable(identity, transaction_id, "delete")
        self.transaction_repo.delete(existing.id)
        logger.info(
            "Transaction deleted",
            extra={"transaction_id": existing.id, "user_id": identity.user_id},
        )
        return MessageResponse(message="Transaction deleted successfully")

    def list_transactions(
        self, identity: Identity, filters: TransactionFilters
    ) -> TransactionListResponse:
        predicates = build_list_filters(identity, filters)
        total = self.transaction_repo.count(predicates)

        offset = (filters.page - 1) * filters.limit
        records = self.transaction_repo.page(predicates, offset, filters.limit)

        return TransactionListResponse(
            transactions=[TransactionResponse.from_record(r) for r in records],
            total=total,
            page=filters.page,
            pages=math.ceil(total / filters.limit),
        )

    def _get_modifiable(
        self, identity: Identity, transaction_id: int, action: str
    ) -> TransactionRecord:
        existing = self.transaction_repo.find_by_id(transaction_id)
        if existing is None:
            raise NotFoundError("Transaction not found")
        if not can_modify(identity, existing.user_id):
            logger.warning(
                "Transaction %s rejected",
                action,
                extra={"transaction_id": transaction_id, "user_id": identity.user_id},
            )
            raise AuthorizationError(
                f"Forbidden: You are not allowed to {action} this transaction"
            )
        return existing
