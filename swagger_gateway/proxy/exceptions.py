"""Exceptions raised while executing the backend request."""

from swagger_gateway.exceptions import GatewayError


class ExecutionError(GatewayError):
    """Base exception for backend call faults."""
    pass


class ClientError(ExecutionError):
    """Raised when the backend call couldn't be attempted or the client failed.

    Attributes:
        backend_url: URL of the backend, if it could be built.
        reason: Description of the failure.
    """

    def __init__(self, backend_url: str, reason: str):
        super().__init__(
            message=f"Request to '{backend_url}' could not be made: {reason}",
            code="CLIENT_ERROR"
        )
        self.backend_url = backend_url
        self.reason = reason


class RemoteRequestError(ExecutionError):
    """Raised when the backend failed before producing a usable response.

    Attributes:
        backend_url: URL of the backend.
        reason: Description of the failure.
    """

    def __init__(self, backend_url: str, reason: str):
        super().__init__(
            message=f"Request to '{backend_url}' failed: {reason}",
            code="REMOTE_REQUEST_ERROR"
        )
        self.backend_url = backend_url
        self.reason = reason


class SchemaViolation(ExecutionError):
    """Raised when the backend's reply violates the declared response schema.

    Attributes:
        detail: What part of the schema was violated.
    """

    def __init__(self, detail: str):
        super().__init__(
            message=f"schema violation: {detail}",
            code="SCHEMA_VIOLATION"
        )
        self.detail = detail
