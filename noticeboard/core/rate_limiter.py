"""Fixed-window attempt counter used to throttle admin logins per client IP."""
from __future__ import annotations

import math
import threading
import time
from typing import Callable, Dict, Tuple

from fastapi import HTTPException, Request


class AttemptLimiter:
    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._windows: Dict[str, Tuple[int, float]] = {}
        self._clock = clock
        self._lock = threading.Lock()

    def hit(self, key: str, limit: int, window_seconds: int) -> float:
        """Count one attempt; return 0 when allowed, else seconds until the window resets."""
        now = self._clock()
        with self._lock:
            count, resets_at = self._windows.get(key, (0, now + window_seconds))
            if now >= resets_at:
                count, resets_at = 0, now + window_seconds
            count += 1
            self._windows[key] = (count, resets_at)
        return 0.0 if count <= limit else resets_at - now

    def clear(self) -> None:
        with self._lock:
            self._windows.clear()


_limiter = AttemptLimiter()


def client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def rate_limit_ip(request: Request, scope: str, *, limit: int, window_seconds: int) -> None:
    retry_after = _limiter.hit(f"{scope}:{client_ip(request)}", limit, window_seconds)
    if retry_after:
        raise HTTPException(
            429,
            "Too many attempts. Try again shortly.",
            headers={"Retry-After": str(max(1, math.ceil(retry_after)))},
        )


def reset_limits() -> None:
    """Forget every counter (used between app instances in tests)."""
    _limiter.clear()
