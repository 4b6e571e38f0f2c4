"""
Endpoint throttle singleton for the search route.

Uses slowapi (built on top of limits) keyed on the same client identity
the contact pipeline uses. The per-submission window for /api/contact is
enforced separately by SubmissionRateLimiter, which needs retry-after
semantics slowapi does not expose.

The search limit string is resolved on every request through
search_rate_limit(), so create_app() can apply the SEARCH_RATE_LIMIT of
the settings it was given rather than the one read at import time.

In tests the limiter is enabled=False so that rapid test requests
don't trigger 429 responses (see conftest.py).
"""

from slowapi import Limiter

from contact_api.core.client_identity import resolve_client_id
from contact_api.core.config import settings

limiter = Limiter(key_func=resolve_client_id, enabled=True)

_search_rate_limit = settings.SEARCH_RATE_LIMIT


def configure_search_rate_limit(limit: str) -> None:
    global _search_rate_limit
    _search_rate_limit = limit


def search_rate_limit() -> str:
    return _search_rate_limit
