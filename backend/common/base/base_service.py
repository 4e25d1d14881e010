"""
Base Service Class.
Provides common utility methods for all services.
"""
from backend.common.errors import UnauthorizedError
from backend.services.system.logger_service import get_logger

logger = get_logger(__name__)

class BaseService:
    """
    Base class for all services.
    """

    def require_authorized(self, authorized: bool, operation: str) -> None:
        """Raise UnauthorizedError unless the caller passed the authorization gate."""
        if not authorized:
            logger.warning("Unauthorized caller rejected", extra={"operation": operation})
            raise UnauthorizedError(f"{operation} requires authorization")
