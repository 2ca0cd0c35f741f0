"""
Error taxonomy of the broker.

Every use case raises only these. The API layer turns them into the
`{"error": {"code", "message", "requestId"}}` envelope.
"""


class ImageBrokerError(Exception):
    """Base class. `code` and `http_status` drive the error envelope."""

    code = "InternalError"
    http_status = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BadRequestError(ImageBrokerError):
    code = "BadRequest"
    http_status = 400


class NotFoundError(ImageBrokerError):
    code = "NotFound"
    http_status = 404


class ConflictError(ImageBrokerError):
    code = "Conflict"
    http_status = 409


class InternalError(ImageBrokerError):
    code = "InternalError"
    http_status = 500


class ObjectStoreUnavailableError(InternalError):
    """Raised when the service runs without object-store credentials."""

    def __init__(self, message: str = "object-store client not available"):
        super().__init__(message)
