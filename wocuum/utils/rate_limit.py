"""
Per-IP rate limits for the account endpoints.

Only failed requests count against a limit: a route dependency checks the
window before the endpoint runs and remembers itself on ``request.state``,
and the error handlers call :func:`record_failed_attempt` when the request
ends in an error response. Counters live in process memory.
"""

import logging

from fastapi import Depends, Request
from limits import RateLimitItem, RateLimitItemPerHour, RateLimitItemPerMinute
from limits.storage import MemoryStorage
from limits.strategies import FixedWindowRateLimiter

from wocuum.config import Settings, get_settings
from wocuum.errors import TooManyRequests

logger = logging.getLogger(__name__)

storage = MemoryStorage()
limiter = FixedWindowRateLimiter(storage)


def client_key(request: Request) -> str:
    return request.client.host if request.client else "unknown"


class RateLimit:
    def __init__(self, name: str, item: RateLimitItem, message: str):
        self.name = name
        self.item = item
        self.message = message

    def __call__(self, request: Request, settings: Settings = Depends(get_settings)):
        if not settings.RATE_LIMIT_ENABLED:
            return

        key = client_key(request)
        if not limiter.test(self.item, self.name, key):
            logger.warning(f"Rate limit '{self.name}' exceeded for {key}")
            raise TooManyRequests(self.message)
        request.state.rate_limit = (self, key)

    def hit(self, key: str):
        limiter.hit(self.item, self.name, key)


def record_failed_attempt(request: Request):
    """Count an error response against the route's limit, if it has one."""
    entry = getattr(request.state, "rate_limit", None)
    if entry is None:
        return
    rate_limit, key = entry
    rate_limit.hit(key)


def reset_limits():
    storage.reset()


register_limit = RateLimit(
    "register",
    RateLimitItemPerHour(5),
    "Too many registration attempts. Please try again later.",
)
login_limit = RateLimit(
    "login",
    RateLimitItemPerMinute(10, 15),
    "Too many login attempts. Please try again later.",
)
delete_account_limit = RateLimit(
    "delete_account",
    RateLimitItemPerHour(3),
    "Too many deletion attempts. Please try again later.",
)
reset_password_limit = RateLimit(
    "reset_password",
    RateLimitItemPerHour(5),
    "Too many password reset attempts. Please try again later.",
)
