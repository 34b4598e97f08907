"""Utility modules for shared functionality."""

from .constants import (
    DEFAULT_AIRTABLE_API_URL,
    DEFAULT_REQUESTS_PER_SECOND,
    EXTERNAL_ID_FIELD,
)
from .rate_limit import RateLimiter
from .retry import retry_on_rate_limit

__all__ = [
    "DEFAULT_AIRTABLE_API_URL",
    "DEFAULT_REQUESTS_PER_SECOND",
    "EXTERNAL_ID_FIELD",
    "RateLimiter",
    "retry_on_rate_limit",
]
