"""
Flask application for the ZeKompanion user backend.
Serves user records and profile imagery behind the dual-identifier access boundary.
"""
import os
import time
import uuid
from typing import Any, Dict, Optional
from dotenv import load_dotenv
from flask import Flask, request, g
from flask_cors import CORS
from flask_compress import Compress
from flask_talisman import Talisman

# Load environment variables from .env file
load_dotenv()

# Initialize logging service FIRST (before other imports)
from backend.services.system.logger_service import get_logger
logger = get_logger(__name__)

from backend.config.env_config import get_app_config
from backend.services.system.auth_middleware import make_auth_middleware
from backend.services.system.security import configure_limiter
from backend.features.users.index import build_user_service, create_user_blueprint
from backend.features.users.service.user_service import UserService
from backend.features.system.index import create_system_blueprint


def _resolve_allowed_origins():
    raw_origins = os.getenv('FRONTEND_ORIGIN')
    if not raw_origins or raw_origins.strip() == '*':
        return '*'

    origins = [origin.strip() for origin in raw_origins.split(',') if origin.strip()]
    return origins or '*'


def _register_request_logging(app: Flask) -> None:
    @app.before_request
    def _log_request_start():
        g.request_start = time.time()
        g.request_id = uuid.uuid4().hex

    @app.after_request
    def _log_request_end(response):
        duration_ms = None
        if hasattr(g, 'request_start'):
            duration_ms = round((time.time() - g.request_start) * 1000, 2)

        # The path may carry a canonical UUID; it is only logged, never echoed.
        logger.info(
            f"{request.method} {request.path}",
            extra={
                'request_id': getattr(g, 'request_id', None),
                'request_method': request.method,
                'request_path': request.path,
                'request_status': response.status_code,
                'request_duration_ms': duration_ms,
                'authorized': getattr(g, 'is_authorized', False),
                'remote_addr': request.headers.get('X-Forwarded-For', request.remote_addr),
            }
        )
        return response


def create_app(config: Optional[Dict[str, Any]] = None, user_service: Optional[UserService] = None) -> Flask:
    """
    Build the Flask app. Tests pass their own config and a user service wired
    to in-memory stores; production wiring comes from the environment.
    """
    config = config or get_app_config()
    user_service = user_service or build_user_service(config)

    app = Flask(__name__)
    is_production = os.getenv('ENVIRONMENT') == 'production'

    app.before_request(make_auth_middleware(config.get('auth_token')))
    _register_request_logging(app)

    # JSON and image API: nothing may frame it or load sub-resources
    csp = {
        'default-src': ["'self'"],
        'frame-ancestors': ["'none'"],
        'form-action': ["'self'"],
    }
    Talisman(
        app,
        force_https=is_production,
        content_security_policy=csp,
        strict_transport_security=is_production,
        session_cookie_secure=is_production,
        session_cookie_http_only=True
    )

    configure_limiter(app)
    Compress(app)
    CORS(
        app,
        resources={r"/*": {"origins": _resolve_allowed_origins()}},
        allow_headers=['Authorization', 'Content-Type'],
        methods=['GET', 'POST', 'PUT', 'DELETE', 'OPTIONS']
    )

    app.register_blueprint(create_user_blueprint(user_service))
    app.register_blueprint(create_system_blueprint(config['profiles_dir']))

    logger.info("Application created", extra={'environment': os.getenv('ENVIRONMENT', 'development')})
    return app


if __name__ == '__main__':
    host = os.getenv('FLASK_RUN_HOST', os.getenv('HOST', '0.0.0.0'))
    port = int(os.getenv('FLASK_RUN_PORT', os.getenv('PORT', '5000')))

    logger.info(
        "Starting Flask server",
        extra={
            'host': host,
            'port': port,
            'environment': os.getenv('ENVIRONMENT', 'development'),
        }
    )

    create_app().run(debug=False, host=host, port=port, threaded=True)
