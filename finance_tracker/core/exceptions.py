"""Error types raised by services and mapped to HTTP responses."""

from typing import Any, Dict, List, Optional, Union


class FinanceTrackerError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(FinanceTrackerError):
    status_code = 400

    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.errors = errors or []


class AuthenticationError(FinanceTrackerError):
    status_code = 401


class AuthorizationError(FinanceTrackerError):
    status_code = 403


class InvalidTokenError(AuthorizationError):
    """Token present but its signature, claims or expiry did not verify."""


class NotFoundError(FinanceTrackerError):
    status_code = 404


class RateLimitExceededError(FinanceTrackerError):
    status_code = 429

    def __init__(self, message: str, retry_after: Union[int, float, None] = None):
        super().__init__(message)
        self.retry_after = retry_after
