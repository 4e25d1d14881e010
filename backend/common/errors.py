"""
Service-layer exceptions.

Every error a request can end in is a ServiceError carrying the HTTP status
and the caller-visible message it translates to.
"""


class ServiceError(Exception):
    """Base class for errors that are translated into a response."""

    status = 500
    public_message = "Internal error."

    def __init__(self, message: str = None, public_message: str = None) -> None:
        # The log message may carry internal identifiers; public_message never does.
        if public_message is not None:
            self.public_message = public_message
        super().__init__(message or self.public_message)


class NotFoundError(ServiceError):
    """No such identity, image, or original source."""

    status = 404
    public_message = "Not Found."


class UnsupportedSizeError(ServiceError):
    """Requested dimensions are outside the resize allow-list."""

    status = 404
    public_message = "Image size not supported."

    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        super().__init__(f"Image size {width}x{height} not supported.")


class InvalidPayloadError(ServiceError):
    """Payload missing, malformed, or carrying an unparsable index."""

    status = 406
    public_message = "invalid index"


class ForbiddenError(ServiceError):
    """The repository rejected a create."""

    status = 403
    public_message = "invalid"


class UnauthorizedError(ServiceError):
    """Operation requires an authorized caller."""

    status = 401
    public_message = "Unauthorized."


class ImageIOError(ServiceError):
    """
    Image store read/write failure.

    Surfaces to callers as a plain not-found; the cache is left in its previous state.
    """

    status = 404
    public_message = "Not Found."


class ContentGenerationError(ServiceError):
    """The content generator could not produce a new user."""

    status = 503
    public_message = "Content generation unavailable."
