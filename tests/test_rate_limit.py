import unittest
from unittest.mock import MagicMock, patch

from finance_tracker.middleware.rate_limit import (
    MemoryRateLimitStore,
    RedisRateLimitStore,
    create_rate_limit_store,
)
from tests.support import ApiTestCase, make_settings


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


class TestMemoryRateLimitStore(unittest.TestCase):
    def test_counts_within_window_then_resets(self):
        clock = FakeClock()
        store = MemoryRateLimitStore(clock=clock)

        self.assertEqual(store.hit("k", 60), (1, 60))
        clock.now += 10
        self.assertEqual(store.hit("k", 60), (2, 50))
        self.assertEqual(store.hit("other", 60)[0], 1)

        clock.now += 50
        self.assertEqual(store.hit("k", 60), (1, 60))

    def test_expired_windows_are_dropped(self):
        clock = FakeClock()
        store = MemoryRateLimitStore(clock=clock, sweep_interval=60)

        for i in range(10_000):
            store.hit(f"ratelimit:auth:10.0.{i // 256}.{i % 256}", 900)
        store.hit("ratelimit:analytics:10.9.9.9", 3600)
        self.assertEqual(len(store), 10_001)

        clock.now += 1800
        store.hit("ratelimit:auth:192.168.0.1", 900)

        self.assertEqual(len(store), 2)
        self.assertEqual(store.hit("ratelimit:analytics:10.9.9.9", 3600)[0], 2)

    def test_sweep_waits_for_interval(self):
        clock = FakeClock()
        store = MemoryRateLimitStore(clock=clock, sweep_interval=600)

        store.hit("a", 10)
        clock.now += 20
        store.hit("b", 10)
        self.assertEqual(len(store), 2)

        clock.now += 600
        store.hit("c", 10)
        self.assertEqual(len(store), 1)

    def test_reset_clears_counters(self):
        store = MemoryRateLimitStore(clock=FakeClock())
        store.hit("k", 60)
        store.reset()
        self.assertEqual(store.hit("k", 60)[0], 1)


class TestRedisRateLimitStore(unittest.TestCase):
    def setUp(self):
        self.client = MagicMock()
        self.pipe = self.client.pipeline.return_value
        self.store = RedisRateLimitStore(self.client)

    def test_first_hit_sets_expiry(self):
        self.pipe.execute.return_value = [1, -1]

        self.assertEqual(self.store.hit("ratelimit:auth:1.2.3.4", 900), (1, 900.0))
        self.pipe.incr.assert_called_once_with("ratelimit:auth:1.2.3.4")
        self.client.expire.assert_called_once_with("ratelimit:auth:1.2.3.4", 900)

    def test_later_hits_keep_existing_expiry(self):
        self.pipe.execute.return_value = [4, 120]

        self.assertEqual(self.store.hit("key", 900), (4, 120.0))
        self.client.expire.assert_not_called()

    def test_factory_picks_backend(self):
        self.assertIsInstance(create_rate_limit_store(make_settings()), MemoryRateLimitStore)

        with patch("finance_tracker.middleware.rate_limit.redis.from_url") as from_url:
            store = create_rate_limit_store(
                make_settings(RATE_LIMIT_REDIS_URL="redis://localhost:6379/1")
            )
        from_url.assert_called_once_with("redis://localhost:6379/1", decode_responses=True)
        self.assertIsInstance(store, RedisRateLimitStore)
        self.assertIs(store.client, from_url.return_value)


class TestRateLimitedRoutes(ApiTestCase):
    settings_overrides = {
        "RATE_LIMIT_ENABLED": True,
        "AUTH_RATE_LIMIT": 2,
        "ANALYTICS_RATE_LIMIT": 1,
    }

    def test_auth_limit_returns_429_with_retry_after(self):
        credentials = {"email": "nobody@example.com", "password": "password123"}
        for _ in range(2):
            self.assertEqual(
                self.client.post("/api/auth/login", json=credentials).status_code, 400
            )

        response = self.client.post("/api/auth/login", json=credentials)

        self.assertEqual(response.status_code, 429)
        self.assertEqual(
            response.json(), {"message": "Too many authentication attempts, try again later"}
        )
        self.assertGreaterEqual(int(response.headers["Retry-After"]), 1)

    def test_groups_are_counted_separately(self):
        self.register("alice@example.com")
        data = self.client.post(
            "/api/auth/login",
            json={"email": "alice@example.com", "password": "password123"},
        ).json()
        headers = {"Authorization": f"Bearer {data['token']}"}

        self.assertEqual(self.client.get("/api/analytics/trends", headers=headers).status_code, 200)
        limited = self.client.get("/api/analytics/monthly", headers=headers)
        self.assertEqual(limited.status_code, 429)
        self.assertEqual(
            limited.json(), {"message": "Too many analytics requests, try again later"}
        )

        self.assertEqual(self.client.get("/api/transactions", headers=headers).status_code, 200)


if __name__ == "__main__":
    unittest.main()
