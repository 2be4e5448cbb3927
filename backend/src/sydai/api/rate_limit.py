"""Rate limiting for the public API.

Limits apply per client address and only when ``env == "production"``;
development and test runs are never throttled.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from sydai.settings import settings

# Per-route limits
REGISTER_LIMIT = "5/minute"
LOGIN_LIMIT = "10/minute"
REFERRAL_VALIDATE_LIMIT = "30/minute"
REFERRAL_COMPLETE_LIMIT = "10/minute"

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["200/minute"],
    storage_uri="memory://",
    enabled=settings.is_production,
)
