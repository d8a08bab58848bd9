"""HTTP client for the finance tracker REST API."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, List, Optional

import httpx

logger = logging.getLogger(__name__)


class ApiClientError(Exception):
    def __init__(
        self,
        status_code: int,
        message: str,
        errors: Optional[List[Dict[str, Any]]] = None,
    ):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message
        self.errors = errors or []


class FinanceApiClient:
    """Thin wrapper over httpx that adds the bearer token and unwraps JSON."""

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: float = 15.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.token = token
        self._client = httpx.Client(
            base_url=base_url.rstrip("/"), timeout=timeout, transport=transport
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "FinanceApiClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # Auth

    def register(
        self, email: str, username: str, password: str, role: Optional[str] = None
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"email": email, "username": username, "password": password}
        if role:
            payload["role"] = role
        data = self._request("POST", "/auth/register", json=payload)
        self.token = data["token"]
        return data

    def login(self, email: str, password: str) -> Dict[str, Any]:
        data = self._request("POST", "/auth/login", json={"email": email, "password": password})
        self.token = data["token"]
        return data

    def me(self) -> Dict[str, Any]:
        return self._request("GET", "/auth/me")["user"]

    # Transactions

    def list_transactions(
        self,
        category: Optional[str] = None,
        description: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        page: int = 1,
        limit: int = 20,
    ) -> Dict[str, Any]:
        params = _params(
            category=category,
            description=description,
            startDate=start_date,
            endDate=end_date,
            page=page,
            limit=limit,
        )
        return self._request("GET", "/transactions", params=params)

    def create_transaction(
        self,
        amount: float,
        type: str,
        category: str,
        date: date,
        description: Optional[str] = None,
    ) -> Dict[str, Any]:
        payload = {
            "amount": amount,
            "type": type,
            "category": category,
            "date": date.isoformat(),
            "description": description,
        }
        return self._request("POST", "/transactions", json=payload)["transaction"]

    def update_transaction(self, transaction_id: int, **changes: Any) -> Dict[str, Any]:
        payload = {
            key: value.isoformat() if isinstance(value, date) else value
            for key, value in changes.items()
        }
        return self._request("PATCH", f"/transactions/{transaction_id}", json=payload)[
            "transaction"
        ]

    def delete_transaction(self, transaction_id: int) -> str:
        return self._request("DELETE", f"/transactions/{transaction_id}")["message"]

    # Analytics

    def monthly_analytics(self, year: Optional[int] = None) -> List[Dict[str, Any]]:
        return self._request("GET", "/analytics/monthly", params=_params(year=year))["months"]

    def category_breakdown(
        self, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> List[Dict[str, Any]]:
        params = _params(startDate=start_date, endDate=end_date)
        return self._request("GET", "/analytics/category", params=params)["categories"]

    def trends(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/analytics/trends")["trends"]

    # Reference data and administration

    def list_categories(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/categories")["categories"]

    def list_users(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/users/profile")["users"]

    def update_user_role(self, user_id: int, role: str) -> Dict[str, Any]:
        return self._request("PUT", f"/users/profile/{user_id}", json={"role": role})["user"]

    def _request(self, method: str, path: str, **kwargs: Any) -> Dict[str, Any]:
        headers = kwargs.pop("headers", {})
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        try:
            response = self._client.request(method, path, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"Request to {path} failed: {e}")
            raise ApiClientError(0, "Could not reach the server") from e

        if response.is_error:
            raise _error_from_response(response)
        return response.json()


def _params(**values: Any) -> Dict[str, Any]:
    params: Dict[str, Any] = {}
    for key, value in values.items():
        if value is None or value == "":
            continue
        params[key] = value.isoformat() if isinstance(value, date) else value
    return params


def _error_from_response(response: httpx.Response) -> ApiClientError:
    try:
        body = response.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}
    message = body.get("message") or response.reason_phrase or "Request failed"
    return ApiClientError(response.status_code, str(message), body.get("errors"))
