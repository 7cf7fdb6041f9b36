"""Unit tests for the sliding-window RateLimiter."""

from unittest.mock import patch

from foodcare.core.rate_limiter import RateLimiter


class TestRateLimiter:
    def test_allows_under_limit(self):
        limiter = RateLimiter(max_requests=3, window_seconds=60)
        assert all(limiter.is_allowed("1.2.3.4") for _ in range(3))

    def test_rejects_over_limit(self):
        limiter = RateLimiter(max_requests=2, window_seconds=60)
        assert limiter.is_allowed("1.2.3.4") is True
        assert limiter.is_allowed("1.2.3.4") is True
        assert limiter.is_allowed("1.2.3.4") is False

    def test_keys_are_independent(self):
        limiter = RateLimiter(max_requests=1, window_seconds=60)
        assert limiter.is_allowed("a") is True
        assert limiter.is_allowed("b") is True
        assert limiter.is_allowed("a") is False

    def test_reset(self):
        limiter = RateLimiter(max_requests=1, window_seconds=60)
        limiter.is_allowed("a")
        limiter.reset()
        assert limiter.is_allowed("a") is True

    def test_window_slides(self):
        limiter = RateLimiter(max_requests=1, window_seconds=10)
        with patch("foodcare.core.rate_limiter.time.monotonic", return_value=100.0):
            assert limiter.is_allowed("a") is True
            assert limiter.is_allowed("a") is False
        with patch("foodcare.core.rate_limiter.time.monotonic", return_value=110.5):
            assert limiter.is_allowed("a") is True
