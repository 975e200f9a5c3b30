"""Request rate limits shared by main.py and the routers.

Kept out of main.py so routers can decorate endpoints without a circular
import.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

# Per-client limits for unauthenticated endpoints
REGISTER_RATE_LIMIT = "3/minute"
LOGIN_RATE_LIMIT = "5/minute"

limiter = Limiter(key_func=get_remote_address)
