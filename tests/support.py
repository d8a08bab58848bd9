"""Shared fixtures: an app wired to a fresh in-memory SQLite database per test."""

import unittest
from datetime import timedelta
from typing import Optional

from fastapi.testclient import TestClient

from finance_tracker.config import Settings
from finance_tracker.database.engine import create_db_engine
from finance_tracker.domain.entities import Role, UserRecord
from finance_tracker.main import create_app
from finance_tracker.services.auth_service import create_access_token

DEFAULT_PASSWORD = "password123"


def make_settings(**overrides) -> Settings:
    values = {
        "DATABASE_URL": "sqlite://",
        "SECRET_KEY": "test-secret-key",
        "RATE_LIMIT_ENABLED": False,
        "LOG_LEVEL": "WARNING",
    }
    values.update(overrides)
    return Settings(**values)


def mint_token(
    settings: Settings,
    user_id: int,
    role: Role,
    email: str = "someone@example.com",
    expires_delta: Optional[timedelta] = None,
) -> str:
    user = UserRecord(
        id=user_id,
        email=email,
        username="someone",
        password_hash="unused",
        role=role,
    )
    return create_access_token(user, settings, expires_delta=expires_delta)


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


class ApiTestCase(unittest.TestCase):
    """Runs each test against its own app, engine and database."""

    settings_overrides: dict = {}

    def setUp(self):
        self.settings = make_settings(**self.settings_overrides)
        self.engine = create_db_engine(self.settings)
        self.app = create_app(self.settings, engine=self.engine, configure_logging=False)
        self.client = TestClient(self.app)
        self.client.__enter__()
        self.addCleanup(self.engine.dispose)
        self.addCleanup(self.client.__exit__, None, None, None)

    def register(
        self,
        email: str,
        username: Optional[str] = None,
        password: str = DEFAULT_PASSWORD,
        role: Optional[str] = None,
    ) -> dict:
        payload = {
            "email": email,
            "username": username or email.split("@")[0][:30].ljust(3, "x"),
            "password": password,
        }
        if role is not None:
            payload["role"] = role
        response = self.client.post("/api/auth/register", json=payload)
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()

    def register_headers(self, email: str, role: Optional[str] = None):
        """Register an account and return (user dict, auth headers)."""
        data = self.register(email, role=role)
        return data["user"], bearer(data["token"])

    def create_transaction(self, headers: dict, **overrides) -> dict:
        payload = {
            "amount": 25.5,
            "type": "expense",
            "category": "Food",
            "date": "2024-03-15",
            "description": "Groceries",
        }
        payload.update(overrides)
        response = self.client.post("/api/transactions", json=payload, headers=headers)
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()["transaction"]
