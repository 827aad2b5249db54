"""
Rate limiting for the authentication endpoints
Uses in-memory storage with sliding window algorithm
"""
import time
from typing import Dict, Tuple
from collections import defaultdict

from fastapi import Request, HTTPException, status

from app.core.config import settings


class RateLimiter:
    """
    In-memory rate limiter using sliding window algorithm.

    State is per process; every worker keeps its own window table.
    """

    def __init__(self):
        # {identifier: [timestamp, ...]}
        self._requests: Dict[str, list] = defaultdict(list)
        self._last_cleanup = time.time()
        self._cleanup_interval = 60  # seconds

    def _cleanup_old_entries(self, window_seconds: int):
        """Remove entries older than the window"""
        now = time.time()

        # Only cleanup periodically to avoid overhead
        if now - self._last_cleanup < self._cleanup_interval:
            return

        cutoff = now - window_seconds

        for identifier in list(self._requests.keys()):
            self._requests[identifier] = [ts for ts in self._requests[identifier] if ts > cutoff]
            if not self._requests[identifier]:
                del self._requests[identifier]

        self._last_cleanup = now

    def is_allowed(
        self,
        identifier: str,
        max_requests: int,
        window_seconds: int = 60
    ) -> Tuple[bool, int, int]:
        """
        Check if a request is allowed under the rate limit.

        Returns:
            Tuple of (is_allowed, remaining_requests, retry_after_seconds)
        """
        self._cleanup_old_entries(window_seconds)

        now = time.time()
        window_start = now - window_seconds

        requests_in_window = [ts for ts in self._requests[identifier] if ts > window_start]
        self._requests[identifier] = requests_in_window

        if len(requests_in_window) >= max_requests:
            # Window frees up when the oldest request expires
            retry_after = int(min(requests_in_window) + window_seconds - now) + 1
            return False, 0, retry_after

        self._requests[identifier].append(now)

        remaining = max_requests - len(self._requests[identifier])
        return True, remaining, 0

    def reset(self):
        self._requests.clear()


# Global rate limiter instance
rate_limiter = RateLimiter()


def _get_client_ip(request: Request) -> str:
    """Get the client IP, considering proxies when they are trusted"""
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for and settings.TRUST_PROXY_HEADERS:
        # Take the first IP in the chain (original client)
        return forwarded_for.split(",")[0].strip()

    if request.client:
        return request.client.host

    return "unknown"


async def auth_rate_limit(request: Request):
    """
    Dependency limiting login/signup attempts per client IP.

    Usage:
        @router.post("/login", dependencies=[Depends(auth_rate_limit)])
        async def login(...):
            ...
    """
    identifier = f"auth:{_get_client_ip(request)}"

    is_allowed, remaining, retry_after = rate_limiter.is_allowed(
        identifier=identifier,
        max_requests=settings.AUTH_RATE_LIMIT,
        window_seconds=settings.AUTH_RATE_WINDOW_SECONDS
    )

    if not is_allowed:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many authentication attempts, try again later",
            headers={
                "X-RateLimit-Limit": str(settings.AUTH_RATE_LIMIT),
                "X-RateLimit-Remaining": "0",
                "Retry-After": str(retry_after),
            }
        )
