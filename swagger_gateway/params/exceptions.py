"""Exceptions raised while extracting declared parameters from a request."""

from swagger_gateway.exceptions import GatewayError


class ParameterError(GatewayError):
    """Base exception for parameter extraction faults."""
    pass


class ExtractionError(ParameterError):
    """Base exception for faults caused by the caller's input."""
    pass


class MissingRequiredParameter(ExtractionError):
    """Raised when a required parameter isn't present in the request.

    Attributes:
        name: Name of the missing parameter.
    """

    def __init__(self, name: str):
        super().__init__(
            message=f"missing required parameter '{name}'",
            code="MISSING_REQUIRED_PARAMETER"
        )
        self.name = name


class MissingRequiredBodyField(ExtractionError):
    """Raised when a required property of a body schema isn't present.

    Attributes:
        name: Name of the missing body property.
    """

    def __init__(self, name: str):
        super().__init__(
            message=f"schema violation in body, missing required field '{name}'",
            code="MISSING_REQUIRED_BODY_FIELD"
        )
        self.name = name


class InvalidParameterType(ExtractionError):
    """Raised when a parameter value can't represent its declared type.

    Attributes:
        name: Name of the parameter.
        actual: Description of the value that was received.
        expected: The declared type.
    """

    def __init__(self, name: str, actual: str, expected: str):
        super().__init__(
            message=f"wrong type for parameter '{name}', expected '{expected}', got '{actual}'",
            code="INVALID_PARAMETER_TYPE"
        )
        self.name = name
        self.actual = actual
        self.expected = expected


class UnsupportedParameterType(ParameterError):
    """Raised when a declaration uses a type that can't be encoded on the wire.

    This is a configuration fault in the schema, not a fault of the request.

    Attributes:
        type: The declared type.
        name: Name of the declaring parameter, if known.
    """

    def __init__(self, type: str, name: str | None = None):
        where = f" (parameter '{name}')" if name else ""
        super().__init__(
            message=f"encoding of '{type}' values is not supported{where}",
            code="UNSUPPORTED_PARAMETER_TYPE"
        )
        self.type = type
        self.name = name
