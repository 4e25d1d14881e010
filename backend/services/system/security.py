"""
Security service for request rate limiting.
"""
import os
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from backend.services.system.logger_service import get_logger

logger = get_logger(__name__)

# Image derivation and AI-backed creation are the expensive paths
DEFAULT_LIMITS = ["600 per minute"]
CREATE_USER_LIMIT = "10 per minute"


def get_limiter_storage_uri() -> str:
    return os.getenv("RATELIMIT_STORAGE_URI", "memory://")


limiter = Limiter(
    key_func=get_remote_address,
    default_limits=DEFAULT_LIMITS,
    storage_uri=get_limiter_storage_uri(),
    strategy="fixed-window"
)


def configure_limiter(app):
    """
    Attach the limiter to the app. RATELIMIT_ENABLED=false turns it off (tests).
    """
    app.config.setdefault("RATELIMIT_ENABLED", os.getenv("RATELIMIT_ENABLED", "true").lower() == "true")
    logger.info("Initializing Flask-Limiter for request rate limiting",
                extra={"enabled": app.config["RATELIMIT_ENABLED"]})
    limiter.init_app(app)
