"""Transaction DTOs and the field rules shared by create and update."""

import datetime as dt
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Annotated, Any, Dict, List, Optional

from pydantic import BaseModel, BeforeValidator

from finance_tracker.domain.entities import TransactionRecord, TransactionType

from .base import CamelModel

CATEGORY_MAX_LENGTH = 50
DESCRIPTION_MAX_LENGTH = 500
_CENT = Decimal("0.01")
# NUMERIC(12, 2)
AMOUNT_MAX = Decimal("9999999999.99")


def check_amount(value: Any) -> Decimal:
    if isinstance(value, bool) or value is None:
        raise ValueError("Amount must be a positive number")
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValueError("Amount must be a positive number")
    if not amount.is_finite() or amount <= 0:
        raise ValueError("Amount must be a positive number")
    if amount > AMOUNT_MAX:
        raise ValueError("Amount must not exceed 9999999999.99")
    amount = amount.quantize(_CENT, rounding=ROUND_HALF_UP)
    if amount <= 0:
        raise ValueError("Amount must be a positive number")
    return amount


def check_type(value: Any) -> TransactionType:
    if isinstance(value, TransactionType):
        return value
    for member in TransactionType:
        if member.value == value:
            return member
    raise ValueError("Type must be either income or expense")


def check_category(value: Any) -> str:
    if not isinstance(value, str) or not 1 <= len(value.strip()) <= CATEGORY_MAX_LENGTH:
        raise ValueError("Category must be between 1 and 50 characters")
    return value.strip()


def check_date(value: Any) -> dt.date:
    """Accept ISO 8601 dates or date-times; keep the calendar date."""
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return dt.date.fromisoformat(text)
        except ValueError:
            pass
        try:
            return dt.datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        except ValueError:
            pass
    raise ValueError("Date must be a valid ISO 8601 date")


def check_description(value: Any) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError("Description must be a string")
    text = value.strip()
    if len(text) > DESCRIPTION_MAX_LENGTH:
        raise ValueError("Description must not exceed 500 characters")
    return text or None


Amount = Annotated[Decimal, BeforeValidator(check_amount)]
Kind = Annotated[TransactionType, BeforeValidator(check_type)]
Category = Annotated[str, BeforeValidator(check_category)]
Day = Annotated[dt.date, BeforeValidator(check_date)]
Description = Annotated[Optional[str], BeforeValidator(check_description)]

# Validators wrap the whole Optional so an explicit null is rejected; omitted fields stay unset.
OptionalAmount = Annotated[Optional[Decimal], BeforeValidator(check_amount)]
OptionalKind = Annotated[Optional[TransactionType], BeforeValidator(check_type)]
OptionalCategory = Annotated[Optional[str], BeforeValidator(check_category)]
OptionalDay = Annotated[Optional[dt.date], BeforeValidator(check_date)]


class TransactionCreateRequest(BaseModel):
    amount: Amount
    type: Kind
    category: Category
    date: Day
    description: Description = None

    def to_values(self) -> Dict[str, Any]:
        return {
            "amount": self.amount,
            "type": self.type.value,
            "category": self.category,
            "date": self.date,
            "description": self.description,
        }


class TransactionUpdateRequest(BaseModel):
    """Partial update: only fields present in the body are changed."""

    amount: OptionalAmount = None
    type: OptionalKind = None
    category: OptionalCategory = None
    date: OptionalDay = None
    description: Description = None

    def to_values(self) -> Dict[str, Any]:
        values: Dict[str, Any] = {}
        for field in self.model_fields_set:
            value = getattr(self, field)
            if isinstance(value, TransactionType):
                value = value.value
            values[field] = value
        return values


class TransactionResponse(CamelModel):
    id: int
    user_id: int
    amount: float
    type: TransactionType
    category: str
    date: dt.date
    description: Optional[str] = None

    @classmethod
    def from_record(cls, record: TransactionRecord) -> "TransactionResponse":
        return cls(
            id=record.id,
            user_id=record.user_id,
            amount=float(record.amount),
            type=record.type,
            category=record.category,
            date=record.date,
            description=record.description,
        )


class TransactionEnvelope(BaseModel):
    transaction: TransactionResponse


class TransactionListResponse(BaseModel):
    transactions: List[TransactionResponse]
    total: int
    page: int
    pages: int


class TransactionFilters(BaseModel):
    category: Optional[str] = None
    description: Optional[str] = None
    start_date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None
    page: int = 1
    limit: int = 20
