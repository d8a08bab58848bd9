"""Data Transfer Objects (DTOs) for API requests and responses"""

from .base import CamelModel, MessageResponse
from .analytics import (
    CategoryBreakdownEntry,
    CategoryBreakdownResponse,
    MonthlyAnalyticsEntry,
    MonthlyAnalyticsResponse,
    TrendPoint,
    TrendsResponse,
)
from .auth import AuthResponse, LoginRequest, RegisterRequest
from .category import CategoryListResponse, CategoryResponse
from .transaction import (
    TransactionCreateRequest,
    TransactionEnvelope,
    TransactionFilters,
    TransactionListResponse,
    TransactionResponse,
    TransactionUpdateRequest,
)
from .user import (
    RoleUpdateRequest,
    UserEnvelope,
    UserListResponse,
    UserResponse,
)

__all__ = [
    # Base
    "CamelModel",
    "MessageResponse",
    # Analytics
    "CategoryBreakdownEntry",
    "CategoryBreakdownResponse",
    "MonthlyAnalyticsEntry",
    "MonthlyAnalyticsResponse",
    "TrendPoint",
    "TrendsResponse",
    # Auth
    "AuthResponse",
    "LoginRequest",
    "RegisterRequest",
    # Category
    "CategoryListResponse",
    "CategoryResponse",
    # Transaction
    "TransactionCreateRequest",
    "TransactionEnvelope",
    "TransactionFilters",
    "TransactionListResponse",
    "TransactionResponse",
    "TransactionUpdateRequest",
    # User
    "RoleUpdateRequest",
    "UserEnvelope",
    "UserListResponse",
    "UserResponse",
]
