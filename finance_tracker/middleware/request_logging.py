"""Request logging middleware to trace requests, durations and identity.

- Adds a unique X-Request-ID header to responses (and uses any incoming header)
- Logs method, path, status, duration, client IP and the caller's user id
- Does not log request/response bodies to avoid leaking sensitive data
"""
from __future__ import annotations

import logging
import time
import uuid
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from finance_tracker.core.exceptions import InvalidTokenError
from finance_tracker.middleware.auth import extract_bearer_token
from finance_tracker.services.auth_service import decode_access_token


logger = logging.getLogger("finance_tracker.request")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log request/response metadata for tracing.

    Extracts the user id from the bearer token if it verifies; an invalid
    token never fails the request here, the auth dependencies decide that.
    """

    async def dispatch(self, request: Request, call_next) -> Response:  # type: ignore[override]
        start = time.monotonic()

        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        request.state.request_id = request_id

        user_id: Optional[int] = None
        token = extract_bearer_token(request.headers.get("Authorization"))
        if token:
            try:
                user_id = decode_access_token(token, request.app.state.settings).user_id
            except InvalidTokenError:
                user_id = None

        try:
            response = await call_next(request)
        except Exception:  # pragma: no cover - we still want to log then reraise
            duration_ms = int((time.monotonic() - start) * 1000)
            logger.exception(
                "Unhandled exception during request",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "client_ip": request.client.host if request.client else None,
                    "request_id": request_id,
                    "duration_ms": duration_ms,
                    "user_id": user_id,
                },
            )
            raise

        duration_ms = int((time.monotonic() - start) * 1000)

        logger.info(
            "Request finished",
            extra={
                "method": request.method,
                "path": request.url.path,
                "status": response.status_code,
                "duration_ms": duration_ms,
                "client_ip": request.client.host if request.client else None,
                "request_id": request_id,
                "user_id": user_id,
            },
        )

        response.headers.setdefault("X-Request-ID", request_id)
        return response
