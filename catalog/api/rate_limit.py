"""
Request rate limiting (slowapi).

Only routes decorated with ``limiter.limit`` are throttled; limits are keyed
on the client address.
"""
import os

from slowapi import Limiter
from slowapi.util import get_remote_address

# e.g. "3/6 seconds", "100/minute"
HEALTH_RATE_LIMIT = os.getenv("HEALTH_RATE_LIMIT", "3/6 seconds")

limiter = Limiter(key_func=get_remote_address)
