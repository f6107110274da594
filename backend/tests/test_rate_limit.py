"""
Tests for in-memory rate limiter middleware.

Tests: RateLimiter class — sliding window, cleanup; rate_limit dependency keys
and 429 headers.
"""

import os, sys
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

import time
import pytest
from unittest.mock import MagicMock

from domain.errors import RateLimitError
from middleware.rate_limit import RateLimiter, rate_limit


def _request(path="/api/payments/process", host="10.0.0.1"):
    request = MagicMock()
    request.url.path = path
    request.client.host = host
    return request


class TestRateLimiter:
    """Tests for the RateLimiter class."""

    @pytest.mark.unit
    def test_allows_requests_under_limit(self):
        limiter = RateLimiter()
        for _ in range(5):
            assert limiter.check("testkey", max_requests=5, window_seconds=60) is True

    @pytest.mark.unit
    def test_blocks_requests_over_limit(self):
        limiter = RateLimiter()
        for _ in range(3):
            limiter.check("testkey", max_requests=3, window_seconds=60)
        assert limiter.check("testkey", max_requests=3, window_seconds=60) is False

    @pytest.mark.unit
    def test_different_keys_independent(self):
        limiter = RateLimiter()
        for _ in range(3):
            limiter.check("key1", max_requests=3, window_seconds=60)
        assert limiter.check("key1", max_requests=3, window_seconds=60) is False
        assert limiter.check("key2", max_requests=3, window_seconds=60) is True

    @pytest.mark.unit
    def test_remaining_count(self):
        limiter = RateLimiter()
        assert limiter.remaining("testkey", max_requests=5, window_seconds=60) == 5
        limiter.check("testkey", max_requests=5, window_seconds=60)
        assert limiter.remaining("testkey", max_requests=5, window_seconds=60) == 4

    @pytest.mark.unit
    def test_cleanup_removes_old_entries(self):
        """Timestamps older than the window no longer count."""
        limiter = RateLimiter()
        old_time = time.time() - 120
        limiter._requests["testkey"] = [old_time, old_time + 1, old_time + 2]
        assert limiter.check("testkey", max_requests=1, window_seconds=60) is True
        assert len(limiter._requests["testkey"]) == 1

    @pytest.mark.unit
    def test_reset(self):
        limiter = RateLimiter()
        limiter.check("testkey", max_requests=1, window_seconds=60)
        limiter.reset()
        assert limiter.check("testkey", max_requests=1, window_seconds=60) is True


class TestRateLimitDependency:
    """Tests for the rate_limit dependency factory."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_raises_429_with_headers(self):
        check = rate_limit(max_requests=2, window_seconds=30)
        request = _request()
        await check(request, user_id=7)
        await check(request, user_id=7)

        with pytest.raises(RateLimitError) as exc_info:
            await check(request, user_id=7)
        err = exc_info.value
        assert err.status_code == 429
        assert err.headers["Retry-After"] == "30"
        assert err.headers["X-RateLimit-Limit"] == "2"
        assert err.headers["X-RateLimit-Remaining"] == "0"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_users_behind_same_ip_are_independent(self):
        check = rate_limit(max_requests=1, window_seconds=60)
        request = _request()
        await check(request, user_id=1)
        await check(request, user_id=2)

        with pytest.raises(RateLimitError):
            await check(request, user_id=1)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_anonymous_callers_keyed_by_ip(self):
        check = rate_limit(max_requests=1, window_seconds=60)
        await check(_request(host="10.0.0.1"), user_id=None)
        await check(_request(host="10.0.0.2"), user_id=None)

        with pytest.raises(RateLimitError):
            await check(_request(host="10.0.0.1"), user_id=None)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_routes_are_independent(self):
        check = rate_limit(max_requests=1, window_seconds=60)
        await check(_request(path="/api/payments/process"), user_id=1)
        await check(_request(path="/api/payments/order/1/refund"), user_id=1)
