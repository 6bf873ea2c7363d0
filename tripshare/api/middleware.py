"""Shared slowapi rate limiter, keyed on the client address."""

from slowapi import Limiter
from slowapi.util import get_remote_address

from tripshare.config import settings

limiter = Limiter(key_func=get_remote_address)

# Applied per route with ``@limiter.limit(RATE_LIMIT)``
RATE_LIMIT = settings.rate_limit
