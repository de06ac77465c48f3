# core/rate_limiter.py

from typing import Dict, List, Optional, Tuple
from threading import Lock
import time

from fastapi import HTTPException, Request


# In-memory sliding window per identifier (single-process deployments).
# identifier -> (window_seconds, attempt timestamps)
_rate_limit_store: Dict[str, Tuple[int, List[float]]] = {}
_lock = Lock()


def _purge_expired(now: float):
    """Drop identifiers with no attempts left inside their window."""
    expired = [
        identifier
        for identifier, (window_seconds, attempts) in _rate_limit_store.items()
        if not attempts or attempts[-1] <= now - window_seconds
    ]
    for identifier in expired:
        del _rate_limit_store[identifier]


def check_rate_limit(identifier: str, max_requests: int, window_seconds: int) -> Tuple[bool, int]:
    """
    Record an attempt for `identifier` and report whether it is allowed.

    Returns:
        (allowed, remaining attempts in the current window)
    """
    now = time.time()
    window_start = now - window_seconds

    with _lock:
        _purge_expired(now)

        _, previous = _rate_limit_store.get(identifier, (window_seconds, []))
        attempts = [ts for ts in previous if ts > window_start]

        if len(attempts) >= max_requests:
            _rate_limit_store[identifier] = (window_seconds, attempts)
            return False, 0

        attempts.append(now)
        _rate_limit_store[identifier] = (window_seconds, attempts)
        return True, max_requests - len(attempts)


def reset_rate_limits():
    with _lock:
        _rate_limit_store.clear()


def get_rate_limit_identifier(request: Request, key: Optional[str] = None) -> str:
    """Prefer an explicit key (e.g. the login email), else the client IP."""
    if key:
        return f"key:{key}"

    client_ip = request.client.host if request.client else "unknown"

    # Forwarded IP (behind proxies)
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        client_ip = forwarded_for.split(",")[0].strip()

    return f"ip:{client_ip}"


def require_rate_limit(
    request: Request,
    max_requests: int,
    window_seconds: int,
    identifier: Optional[str] = None,
) -> int:
    """
    Raises HTTPException 429 when the limit is exceeded.
    """
    if identifier is None:
        identifier = get_rate_limit_identifier(request)

    allowed, remaining = check_rate_limit(identifier, max_requests, window_seconds)

    if not allowed:
        raise HTTPException(
            status_code=429,
            detail=f"Rate limit exceeded. Maximum {max_requests} requests per {window_seconds} seconds.",
            headers={
                "X-RateLimit-Limit": str(max_requests),
                "Retry-After": str(window_seconds),
            },
        )

    return remaining
