import logging
import time
from dataclasses import dataclass
from functools import wraps

from flask import current_app, jsonify, request

logger = logging.getLogger(__name__)

RATE_LIMITERS_KEY = "rate_limiters"


@dataclass
class RateLimitEntry:
    count: int
    window_start: float


class FixedWindowRateLimiter:
    """
    In-memory fixed window counter keyed by client IP.

    Entries live for the whole process lifetime; the request path never removes
    them. Read-then-write is not locked, so simultaneous requests from one IP
    may slip past the limit.
    """

    def __init__(self, window_seconds, max_requests, clock=time.time):
        self.window_seconds = window_seconds
        self.max_requests = max_requests
        self.clock = clock
        self.entries = {}

    def is_rate_limited(self, key):
        """Record a hit for ``key`` and tell whether it must be rejected."""
        now = self.clock()
        entry = self.entries.get(key) or RateLimitEntry(count=0, window_start=now)

        # a hit exactly on the window boundary still belongs to the old window
        if now - entry.window_start > self.window_seconds:
            self.entries[key] = RateLimitEntry(count=1, window_start=now)
            return False

        if entry.count >= self.max_requests:
            return True

        entry.count += 1
        self.entries[key] = entry
        return False

    def purge_expired(self):
        """Drop entries whose window is over. Returns how many were removed."""
        cutoff = self.clock() - self.window_seconds
        expired = [
            key for key, entry in self.entries.items() if entry.window_start < cutoff
        ]
        for key in expired:
            del self.entries[key]
        return len(expired)


def get_client_ip():
    """First hop of X-Forwarded-For, or "unknown" when there is none"""
    forwarded_for = request.headers.get("X-Forwarded-For", "")
    return forwarded_for.split(",")[0].strip() or "unknown"


def rate_limited(limiter_name, message):
    """Reject with 429 once the named limiter refuses the client IP."""

    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            limiter = current_app.extensions[RATE_LIMITERS_KEY][limiter_name]
            client_ip = get_client_ip()

            if limiter.is_rate_limited(client_ip):
                logger.warning(
                    "Rate limit exceeded on %s for %s", limiter_name, client_ip
                )
                return jsonify({"error": message}), 429

            return f(*args, **kwargs)

        return decorated_function

    return decorator
