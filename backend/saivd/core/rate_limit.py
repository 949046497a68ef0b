# saivd/core/rate_limit.py

from slowapi import Limiter
from slowapi.util import get_remote_address

from saivd.core.config import PUBLIC_KEY_RATE_LIMIT

# Initialize limiter (in-memory storage, per process)
limiter = Limiter(key_func=get_remote_address)

# Rate limit constants
PUBLIC_KEY_LIMIT = PUBLIC_KEY_RATE_LIMIT
