"""
Tests for the operation-class rate limiter.

The limiter runs on a fake clock, so window arithmetic is exact.
"""

import asyncio
from typing import Optional

import pytest
from starlette.requests import Request

from app.core.config import Settings
from app.domain.errors import ErrorKind, RateLimited
from app.shared.security.rate_limiting import (
    UNKNOWN_CLIENT,
    InMemoryRateLimitStore,
    LimitClass,
    RateLimiter,
    RateLimitRule,
    get_client_key,
)

AUTH_RULE = RateLimitRule(max_requests=5, window_seconds=900)


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def limiter(clock: FakeClock) -> RateLimiter:
    return RateLimiter(
        {LimitClass.AUTH: AUTH_RULE, LimitClass.ADMIN: RateLimitRule(2, 60)},
        clock=clock,
        sweep_interval_seconds=0.01,
    )


def make_request(headers: Optional[dict[str, str]] = None, client=("10.0.0.9", 1234)) -> Request:
    scope = {
        "type": "http",
        "method": "GET",
        "path": "/",
        "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()],
        "client": client,
        "query_string": b"",
    }
    return Request(scope)


class TestFixedWindow:
    """Tests for check_and_consume and enforce."""

    def test_budget_then_rejection(self, limiter: RateLimiter) -> None:
        """Five requests pass, the sixth is refused."""
        for expected_remaining in (4, 3, 2, 1, 0):
            decision = limiter.check_and_consume(LimitClass.AUTH, "1.2.3.4")
            assert decision.allowed
            assert decision.remaining == expected_remaining
        assert not limiter.check_and_consume(LimitClass.AUTH, "1.2.3.4").allowed

    def test_retry_after_is_remaining_window(
        self, limiter: RateLimiter, clock: FakeClock
    ) -> None:
        """Retry-after equals the time left until the window resets."""
        for _ in range(5):
            limiter.check_and_consume(LimitClass.AUTH, "1.2.3.4")
        clock.now = 100.0
        decision = limiter.check_and_consume(LimitClass.AUTH, "1.2.3.4")
        assert decision.retry_after_seconds == 800

    def test_retry_after_is_at_least_one_second(
        self, limiter: RateLimiter, clock: FakeClock
    ) -> None:
        """A fraction of a second left still reports one second."""
        for _ in range(5):
            limiter.check_and_consume(LimitClass.AUTH, "k")
        clock.now = 899.7
        assert limiter.check_and_consume(LimitClass.AUTH, "k").retry_after_seconds == 1

    def test_window_resets_at_boundary(self, limiter: RateLimiter, clock: FakeClock) -> None:
        """At reset_at the counter starts over."""
        for _ in range(6):
            limiter.check_and_consume(LimitClass.AUTH, "k")
        clock.now = 900.0
        decision = limiter.check_and_consume(LimitClass.AUTH, "k")
        assert decision.allowed
        assert decision.remaining == 4

    def test_keys_and_classes_are_independent(self, limiter: RateLimiter) -> None:
        """Exhausting one client or class leaves the others untouched."""
        for _ in range(5):
            limiter.check_and_consume(LimitClass.AUTH, "a")
        assert not limiter.check_and_consume(LimitClass.AUTH, "a").allowed
        assert limiter.check_and_consume(LimitClass.AUTH, "b").allowed
        assert limiter.check_and_consume(LimitClass.ADMIN, "a").allowed

    def test_enforce_raises_rate_limited(self, limiter: RateLimiter) -> None:
        """enforce() turns a refusal into RateLimited with the delay."""
        limiter.enforce(LimitClass.ADMIN, "k")
        limiter.enforce(LimitClass.ADMIN, "k")
        with pytest.raises(RateLimited) as exc_info:
            limiter.enforce(LimitClass.ADMIN, "k")
        assert exc_info.value.kind is ErrorKind.RATE_LIMITED
        assert exc_info.value.retry_after_seconds == 60
        assert exc_info.value.resource == "admin"


class TestSweep:
    """Tests for expired entry cleanup."""

    def test_sweep_drops_only_expired_entries(
        self, limiter: RateLimiter, clock: FakeClock
    ) -> None:
        """Entries whose window has ended are removed."""
        limiter.check_and_consume(LimitClass.ADMIN, "short")
        limiter.check_and_consume(LimitClass.AUTH, "long")
        clock.now = 60.0
        assert limiter.sweep() == 1
        store = limiter.store
        assert isinstance(store, InMemoryRateLimitStore)
        assert len(store) == 1
        assert store.get("auth:long") is not None

    def test_reset_clears_everything(self, limiter: RateLimiter) -> None:
        limiter.check_and_consume(LimitClass.AUTH, "k")
        limiter.reset()
        assert len(limiter.store) == 0

    @pytest.mark.asyncio
    async def test_start_and_stop_background_sweep(
        self, limiter: RateLimiter, clock: FakeClock
    ) -> None:
        """The sweep task runs while started and is gone after stop()."""
        limiter.check_and_consume(LimitClass.ADMIN, "k")
        clock.now = 61.0
        await limiter.start()
        assert limiter.running
        await asyncio.sleep(0.05)
        assert len(limiter.store) == 0
        await limiter.stop()
        assert not limiter.running

    @pytest.mark.asyncio
    async def test_stop_without_start_is_harmless(self, limiter: RateLimiter) -> None:
        await limiter.stop()
        assert not limiter.running


class TestFromSettings:
    """Tests for building the limiter from configuration."""

    def test_rules_follow_settings(self) -> None:
        """Budgets and windows come from Settings."""
        config = Settings(
            database_url=None,
            rate_limit_auth_requests=3,
            rate_limit_auth_window_seconds=30,
        )
        limiter = RateLimiter.from_settings(config)
        assert limiter.rule_for(LimitClass.AUTH) == RateLimitRule(3, 30)
        assert limiter.rule_for(LimitClass.JOB_CREATION).max_requests == 10
        assert limiter.rule_for(LimitClass.APPLICATION).max_requests == 20
        assert limiter.rule_for(LimitClass.ADMIN) == RateLimitRule(100, 60)


class TestClientKey:
    """Tests for get_client_key."""

    def test_first_forwarded_hop_wins(self) -> None:
        request = make_request({"X-Forwarded-For": "203.0.113.7, 10.0.0.1"})
        assert get_client_key(request, trust_forwarded=True) == "203.0.113.7"

    def test_real_ip_is_second_choice(self) -> None:
        request = make_request({"X-Real-IP": "198.51.100.2"})
        assert get_client_key(request, trust_forwarded=True) == "198.51.100.2"

    def test_connection_address_without_headers(self) -> None:
        assert get_client_key(make_request(), trust_forwarded=True) == "10.0.0.9"

    def test_forwarded_headers_ignored_when_untrusted(self) -> None:
        request = make_request({"X-Forwarded-For": "203.0.113.7"})
        assert get_client_key(request, trust_forwarded=False) == "10.0.0.9"

    def test_unknown_bucket(self) -> None:
        """No headers and no peer address share one bucket."""
        assert get_client_key(make_request(client=None), trust_forwarded=True) == UNKNOWN_CLIENT
