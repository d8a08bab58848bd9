import unittest
from datetime import timedelta

from finance_tracker.domain.entities import Role
from tests.support import ApiTestCase, bearer, mint_token


class TestRegister(ApiTestCase):
    def test_register_returns_user_and_token(self):
        data = self.register("Alice@Example.com", username="alice")

        self.assertEqual(data["user"]["email"], "alice@example.com")
        self.assertEqual(data["user"]["username"], "alice")
        self.assertEqual(data["user"]["role"], "user")
        self.assertNotIn("password", data["user"])
        self.assertNotIn("password_hash", data["user"])
        self.assertTrue(data["token"])

    def test_register_accepts_known_role_and_coerces_unknown(self):
        admin = self.register("boss@example.com", role="admin")
        readonly = self.register("viewer@example.com", role="read-only")
        other = self.register("odd@example.com", role="superuser")

        self.assertEqual(admin["user"]["role"], "admin")
        self.assertEqual(readonly["user"]["role"], "read-only")
        self.assertEqual(other["user"]["role"], "user")

    def test_non_string_role_falls_back_to_user(self):
        for email, role in (("num@example.com", 5), ("list@example.com", ["admin"]), ("null@example.com", None)):
            with self.subTest(role=role):
                response = self.client.post(
                    "/api/auth/register",
                    json={"email": email, "username": "someone", "password": "password123", "role": role},
                )
                self.assertEqual(response.status_code, 201, response.text)
                self.assertEqual(response.json()["user"]["role"], "user")

    def test_duplicate_email_rejected(self):
        self.register("alice@example.com")
        response = self.client.post(
            "/api/auth/register",
            json={"email": "ALICE@example.com", "username": "alice2", "password": "password123"},
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"message": "User already registered"})

    def test_invalid_payload_lists_field_errors(self):
        response = self.client.post(
            "/api/auth/register",
            json={"email": "not-an-email", "username": "al", "password": "short"},
        )

        self.assertEqual(response.status_code, 400)
        body = response.json()
        self.assertEqual(body["message"], "Validation failed")
        fields = {error["field"]: error["message"] for error in body["errors"]}
        self.assertEqual(set(fields), {"email", "username", "password"})
        self.assertEqual(fields["username"], "Username must be between 3 and 30 characters long")
        self.assertEqual(fields["password"], "Password must be at least 8 characters long")


class TestLogin(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.register("alice@example.com", username="alice")

    def test_login_succeeds_case_insensitively(self):
        response = self.client.post(
            "/api/auth/login",
            json={"email": "ALICE@example.com", "password": "password123"},
        )

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["user"]["email"], "alice@example.com")
        self.assertTrue(body["token"])

    def test_unknown_email_and_wrong_password_look_the_same(self):
        unknown = self.client.post(
            "/api/auth/login",
            json={"email": "nobody@example.com", "password": "password123"},
        )
        wrong = self.client.post(
            "/api/auth/login",
            json={"email": "alice@example.com", "password": "password999"},
        )

        self.assertEqual(unknown.status_code, 400)
        self.assertEqual(wrong.status_code, 400)
        self.assertEqual(unknown.json(), {"message": "Invalid email or password"})
        self.assertEqual(unknown.json(), wrong.json())

    def test_empty_password_is_a_validation_error(self):
        response = self.client.post(
            "/api/auth/login", json={"email": "alice@example.com", "password": ""}
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(
            response.json()["errors"], [{"field": "password", "message": "Password is required"}]
        )


class TestIdentityMiddleware(ApiTestCase):
    def test_me_returns_caller(self):
        user, headers = self.register_headers("alice@example.com")
        response = self.client.get("/api/auth/me", headers=headers)

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["user"], user)

    def test_missing_token_is_401(self):
        response = self.client.get("/api/auth/me")
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {"message": "Unauthorized"})

    def test_non_bearer_scheme_is_401(self):
        response = self.client.get("/api/auth/me", headers={"Authorization": "Basic abc"})
        self.assertEqual(response.status_code, 401)

    def test_invalid_token_is_403(self):
        response = self.client.get("/api/auth/me", headers=bearer("garbage"))
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json(), {"message": "Forbidden"})

    def test_expired_token_is_403(self):
        user, _ = self.register_headers("alice@example.com")
        token = mint_token(self.settings, user["id"], Role.USER, expires_delta=timedelta(seconds=-1))

        response = self.client.get("/api/transactions", headers=bearer(token))
        self.assertEqual(response.status_code, 403)

    def test_token_for_deleted_user_is_404_on_me(self):
        token = mint_token(self.settings, 999, Role.USER)
        response = self.client.get("/api/auth/me", headers=bearer(token))
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {"message": "User not found"})

    def test_auth_errors_win_over_body_validation(self):
        response = self.client.post("/api/transactions", json={"amount": -1})
        self.assertEqual(response.status_code, 401)

    def test_request_id_is_echoed(self):
        response = self.client.get("/api/health", headers={"X-Request-ID": "req-123"})
        self.assertEqual(response.headers["X-Request-ID"], "req-123")

        generated = self.client.get("/api/health")
        self.assertTrue(generated.headers["X-Request-ID"])


class TestHealth(ApiTestCase):
    def test_liveness_and_readiness(self):
        self.assertEqual(self.client.get("/api/health").json()["status"], "healthy")

        db = self.client.get("/api/health/db").json()
        self.assertEqual(db["status"], "healthy")
        self.assertEqual(db["database"], "connected")

        root = self.client.get("/").json()
        self.assertEqual(root["docs"], "/api/docs")


if __name__ == "__main__":
    unittest.main()
