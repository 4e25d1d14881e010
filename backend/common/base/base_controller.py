"""
Base Controller Class.
Provides standardized response handling for all controllers.
"""
from typing import Any, Tuple
from flask import jsonify, Response
from backend.common.errors import ServiceError
from backend.services.system.logger_service import get_logger, log_error

logger = get_logger(__name__)

class BaseController:
    """
    Base class for all controllers.
    Turns service results and service errors into Flask responses.
    """

    def handle_response(self, data: Any, status: int = 200) -> Tuple[Response, int]:
        """
        JSON success response.
        :param data: The payload to return, serialized as-is.
        :param status: HTTP status code (default 200).
        """
        return jsonify(data), status

    def handle_text(self, text: str, status: int = 200) -> Response:
        return Response(text, status=status, mimetype='text/plain')

    def handle_image(self, data: bytes, mimetype: str) -> Response:
        return Response(data, status=200, mimetype=mimetype)

    def handle_service_error(self, exc: ServiceError) -> Response:
        """
        Translate a ServiceError into its caller-visible outcome.
        The detailed message is logged; only the public message is returned.
        """
        logger.warning(
            f"Request failed ({exc.status}): {exc}",
            extra={'error_type': type(exc).__name__, 'status': exc.status}
        )
        return self.handle_text(exc.public_message, exc.status)

    def handle_error(self, exc: Exception) -> Tuple[Response, int]:
        """
        Last-resort response for unexpected failures.
        """
        log_error(logger, exc, {'context': 'unhandled controller error'})
        return jsonify({'success': False, 'error': 'Internal error.'}), 500
