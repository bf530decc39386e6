"""Exceptions raised while loading a schema or resolving a request against it."""

from swagger_gateway.exceptions import GatewayError


class SchemaError(GatewayError):
    """Base exception for schema errors."""
    pass


class SchemaLoadError(SchemaError):
    """Raised when a schema document can't be read or is malformed.

    Attributes:
        source: Path or description of the document being loaded.
        reason: What was wrong with it.
    """

    def __init__(self, source: str, reason: str):
        super().__init__(
            message=f"Unable to load schema from '{source}': {reason}",
            code="SCHEMA_LOAD_ERROR"
        )
        self.source = source
        self.reason = reason


class EndpointNotFoundError(SchemaError):
    """Raised when no endpoint of the schema matches the inbound path.

    Attributes:
        path: The inbound request path.
    """

    def __init__(self, path: str):
        super().__init__(
            message=f"No endpoint matches path '{path}'",
            code="ENDPOINT_NOT_FOUND"
        )
        self.path = path


class OperationNotFoundError(SchemaError):
    """Raised when the matched endpoint doesn't declare the inbound method.

    Attributes:
        method: The inbound HTTP method.
        path: Template of the matched endpoint.
    """

    def __init__(self, method: str, path: str):
        super().__init__(
            message=f"Method '{method.upper()}' is not allowed for '{path}'",
            code="OPERATION_NOT_FOUND"
        )
        self.method = method
        self.path = path
