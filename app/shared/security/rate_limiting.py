"""
Rate limiting configuration and setup.

Two layers protect the API:
- slowapi enforces a generous per-client default limit on public reads.
- RateLimiter enforces fixed-window budgets on sensitive operation
  classes (authentication, job creation, applications, admin writes).

RateLimiter is an explicitly constructed instance that owns its store
and its sweep task. Swapping InMemoryRateLimitStore for a shared store
does not touch any call site. State is process-local: restarts reset
the counters and separate processes keep separate counters.
"""

import asyncio
import logging
import math
import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Mapping, Optional

from slowapi import Limiter
from starlette.requests import Request

from app.core.config import Settings, settings
from app.domain.errors import RateLimited

logger = logging.getLogger(__name__)

UNKNOWN_CLIENT = "unknown"
DEFAULT_SWEEP_INTERVAL_SECONDS = 5 * 60


class LimitClass(Enum):
    """Operation classes with their own request budget."""

    AUTH = "auth"
    JOB_CREATION = "job_creation"
    APPLICATION = "application"
    ADMIN = "admin"


@dataclass(frozen=True)
class RateLimitRule:
    """At most ``max_requests`` per fixed window of ``window_seconds``."""

    max_requests: int
    window_seconds: float


@dataclass
class RateLimitEntry:
    """Counter of one (limit class, client) pair for its current window."""

    count: int
    reset_at: float


@dataclass(frozen=True)
class RateLimitDecision:
    """Outcome of a check. ``retry_after_seconds`` is set when rejected."""

    allowed: bool
    retry_after_seconds: Optional[int] = None
    remaining: int = 0


class RateLimitStore(ABC):
    """Storage for rate-limit counters.

    ``hit`` must be atomic: concurrent hits on one key never lose an
    increment and never admit more than ``rule.max_requests`` requests
    in a window.
    """

    @abstractmethod
    def hit(self, key: str, rule: RateLimitRule, now: float) -> RateLimitDecision:
        raise NotImplementedError

    @abstractmethod
    def sweep(self, now: float) -> int:
        """Drop expired entries. Returns the number removed."""
        raise NotImplementedError

    @abstractmethod
    def clear(self) -> None:
        raise NotImplementedError


class InMemoryRateLimitStore(RateLimitStore):
    """Process-local store guarded by a lock."""

    def __init__(self) -> None:
        self._entries: dict[str, RateLimitEntry] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: str) -> Optional[RateLimitEntry]:
        with self._lock:
            return self._entries.get(key)

    def hit(self, key: str, rule: RateLimitRule, now: float) -> RateLimitDecision:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None or now >= entry.reset_at:
                self._entries[key] = RateLimitEntry(count=1, reset_at=now + rule.window_seconds)
                return RateLimitDecision(allowed=True, remaining=rule.max_requests - 1)

            if entry.count >= rule.max_requests:
                retry_after = max(1, math.ceil(entry.reset_at - now))
                return RateLimitDecision(allowed=False, retry_after_seconds=retry_after)

            entry.count += 1
            return RateLimitDecision(allowed=True, remaining=rule.max_requests - entry.count)

    def sweep(self, now: float) -> int:
        with self._lock:
            expired = [key for key, entry in self._entries.items() if now >= entry.reset_at]
            for key in expired:
                del self._entries[key]
        return len(expired)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


class RateLimiter:
    """Keyed fixed-window limiter for sensitive operation classes.

    Windows reset wholesale at ``reset_at``; a burst straddling a window
    boundary can briefly exceed the nominal rate.
    """

    def __init__(
        self,
        rules: Mapping[LimitClass, RateLimitRule],
        store: Optional[RateLimitStore] = None,
        clock: Callable[[], float] = time.monotonic,
        sweep_interval_seconds: float = DEFAULT_SWEEP_INTERVAL_SECONDS,
    ) -> None:
        self._rules = dict(rules)
        self._store = store if store is not None else InMemoryRateLimitStore()
        self._clock = clock
        self._sweep_interval = sweep_interval_seconds
        self._sweep_task: Optional[asyncio.Task] = None

    @classmethod
    def from_settings(cls, config: Settings, **kwargs) -> "RateLimiter":
        """Build a limiter with the per-class budgets from settings."""
        rules = {
            LimitClass.AUTH: RateLimitRule(
                config.rate_limit_auth_requests, config.rate_limit_auth_window_seconds
            ),
            LimitClass.JOB_CREATION: RateLimitRule(
                config.rate_limit_job_creation_requests,
                config.rate_limit_job_creation_window_seconds,
            ),
            LimitClass.APPLICATION: RateLimitRule(
                config.rate_limit_application_requests,
                config.rate_limit_application_window_seconds,
            ),
            LimitClass.ADMIN: RateLimitRule(
                config.rate_limit_admin_requests, config.rate_limit_admin_window_seconds
            ),
        }
        kwargs.setdefault("sweep_interval_seconds", config.rate_limit_sweep_interval_seconds)
        return cls(rules, **kwargs)

    @property
    def store(self) -> RateLimitStore:
        return self._store

    @property
    def running(self) -> bool:
        return self._sweep_task is not None and not self._sweep_task.done()

    def rule_for(self, limit_class: LimitClass) -> RateLimitRule:
        return self._rules[limit_class]

    def check_and_consume(self, limit_class: LimitClass, client_key: str) -> RateLimitDecision:
        """Count one request of ``client_key`` against ``limit_class``."""
        rule = self._rules[limit_class]
        decision = self._store.hit(f"{limit_class.value}:{client_key}", rule, self._clock())
        if not decision.allowed:
            logger.warning(
                "Rate limit exceeded: class=%s client=%s retry_after=%ss",
                limit_class.value,
                client_key,
                decision.retry_after_seconds,
            )
        return decision

    def enforce(self, limit_class: LimitClass, client_key: str) -> RateLimitDecision:
        """Like check_and_consume, but raise when the request is rejected.

        Raises:
            RateLimited: Carrying the retry-after delay in seconds.
        """
        decision = self.check_and_consume(limit_class, client_key)
        if not decision.allowed:
            raise RateLimited(decision.retry_after_seconds or 1, limit_class=limit_class.value)
        return decision

    def sweep(self) -> int:
        """Drop expired entries now."""
        removed = self._store.sweep(self._clock())
        if removed:
            logger.debug("Rate limiter sweep removed %d expired entries", removed)
        return removed

    def reset(self) -> None:
        self._store.clear()

    async def start(self) -> None:
        """Start the periodic sweep on the running event loop."""
        if self.running:
            return
        self._sweep_task = asyncio.create_task(self._sweep_loop(), name="rate-limit-sweep")
        logger.info("Rate limiter sweep started (every %.0fs)", self._sweep_interval)

    async def stop(self) -> None:
        """Cancel the periodic sweep and wait for it to finish."""
        task, self._sweep_task = self._sweep_task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("Rate limiter sweep stopped")

    async def _sweep_loop(self) -> None:
        while True:
            await asyncio.sleep(self._sweep_interval)
            self.sweep()


def get_client_key(request: Request, trust_forwarded: Optional[bool] = None) -> str:
    """Derive the rate-limit key of a request.

    Order: first X-Forwarded-For entry, X-Real-IP, the direct connection
    address, then the shared "unknown" bucket.
    """
    if trust_forwarded is None:
        trust_forwarded = settings.trust_forwarded_headers
    if trust_forwarded:
        forwarded_for = request.headers.get("x-forwarded-for", "")
        first_hop = forwarded_for.split(",")[0].strip()
        if first_hop:
            return first_hop
        real_ip = request.headers.get("x-real-ip", "").strip()
        if real_ip:
            return real_ip
    if request.client is not None and request.client.host:
        return request.client.host
    return UNKNOWN_CLIENT


limiter = Limiter(key_func=get_client_key, default_limits=[settings.rate_limit_default])
