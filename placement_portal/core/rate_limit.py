"""
Request rate limits (production only).

Every /api route shares API_RATE_LIMIT per client address through
SlowAPIMiddleware; the auth routes carry the stricter AUTH_RATE_LIMIT as a
route decorator instead. create_app() switches the limiter on when
ENVIRONMENT=production.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

API_RATE_LIMIT = "200/15minutes"
AUTH_RATE_LIMIT = "20/15minutes"

API_LIMIT_MESSAGE = "Too many requests, please try again later."
AUTH_LIMIT_MESSAGE = "Too many login attempts, please try again after 15 minutes."

limiter = Limiter(key_func=get_remote_address, application_limits=[API_RATE_LIMIT], enabled=False)
