"""Rate limiting configuration for API endpoints"""
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
import os

def get_rate_limit_key():
    """Get rate limit key function - the client address as seen by the WSGI server.

    Forwarded headers are only honoured through ProxyFix, configured in create_app
    with the number of trusted proxies, so clients cannot pick their own key.
    """
    return get_remote_address()

def init_rate_limiter(app):
    """Initialize rate limiter with Flask app"""
    # Default rate limits (per minute)
    default_limit = os.environ.get('RATE_LIMIT_DEFAULT', '100 per minute')

    limiter = Limiter(
        key_func=get_rate_limit_key,
        app=app,
        default_limits=[default_limit],
        storage_uri=os.environ.get('RATE_LIMIT_STORAGE_URI', 'memory://'),  # Optional: Redis URL for distributed rate limiting
        headers_enabled=True  # Include rate limit headers in response
    )

    return limiter

# Rate limit presets for different endpoint types
RATE_LIMITS = {
    'strict': '10 per minute',      # For abuse-prone operations
    'moderate': '30 per minute',    # For write operations (signups)
    'standard': '60 per minute',    # For read operations (leaderboard)
    'generous': '100 per minute',   # For less critical endpoints
}
