# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import threading
import time
from collections import deque
from collections.abc import Callable
from functools import wraps
from http import HTTPStatus

from flask import request

from campusdesk.shared.config import load_config
from campusdesk.shared.errors.base import AppError
from campusdesk.shared.logging import logger


class RateLimitedError(AppError):
    def __init__(self, retry_after: float) -> None:
        super().__init__(
            code="rate_limited",
            status=HTTPStatus.TOO_MANY_REQUESTS,
            context={"retry_after": round(retry_after, 1)},
        )


class InMemoryRateLimiter:
    """Sliding-window counter per key, local to one process."""

    def __init__(self, limit: int, window_seconds: float, *, clock: Callable[[], float] = time.monotonic) -> None:
        self.limit = max(1, int(limit))
        self.window = max(0.1, float(window_seconds))
        self._clock = clock
        self._hits: dict[str, deque[float]] = {}
        self._lock = threading.Lock()
        self._next_prune = 0.0

    @property
    def tracked_callers(self) -> int:
        return len(self._hits)

    def _evict(self, hits: deque[float], now: float) -> None:
        while hits and now - hits[0] >= self.window:
            hits.popleft()

    def _prune(self, now: float) -> None:
        # At most once per window, drop callers whose hits have all aged out.
        if now < self._next_prune:
            return
        self._next_prune = now + self.window
        for key in list(self._hits):
            hits = self._hits[key]
            self._evict(hits, now)
            if not hits:
                del self._hits[key]

    def retry_after(self, key: str) -> float:
        with self._lock:
            hits = self._hits.get(key)
            if not hits or len(hits) < self.limit:
                return 0.0
            return max(0.0, self.window - (self._clock() - hits[0]))

    def allow(self, key: str) -> bool:
        now = self._clock()
        with self._lock:
            self._prune(now)
            hits = self._hits.setdefault(key, deque())
            self._evict(hits, now)
            if len(hits) >= self.limit:
                return False
            hits.append(now)
            return True


def _caller() -> str:
    forwarded = request.headers.get("X-Forwarded-For", "")
    return forwarded.split(",")[0].strip() or request.remote_addr or "unknown"


def rate_limit(limit: int | None = None, window_seconds: float | None = None):
    """Throttle a view per client IP; disabled with ``ENABLE_RATE_LIMIT=0``."""

    security = load_config().security
    limiter = InMemoryRateLimiter(
        limit or security.rate_limit_requests,
        window_seconds or security.rate_limit_window,
    )

    def decorator(view: Callable):
        @wraps(view)
        def guarded(*args, **kwargs):
            if load_config().security.enable_rate_limit:
                key = f"{request.endpoint}:{_caller()}"
                if not limiter.allow(key):
                    logger.warning(f"rate_limit: {request.endpoint} throttled for {_caller()}")
                    raise RateLimitedError(limiter.retry_after(key))
            return view(*args, **kwargs)

        guarded.limiter = limiter  # type: ignore[attr-defined]
        return guarded

    return decorator


__all__ = ["InMemoryRateLimiter", "RateLimitedError", "rate_limit"]
