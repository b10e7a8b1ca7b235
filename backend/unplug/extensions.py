"""Flask extensions initialization."""

from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

# Rate limiter; storage comes from RATELIMIT_STORAGE_URI in app config
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["1000 per day", "200 per hour"],
)
