"""Exceptions raised while reading the inbound request."""

from swagger_gateway.exceptions import GatewayError


class InvalidRequestBodyError(GatewayError):
    """Raised when the inbound body can't be parsed for its content type.

    Attributes:
        content_type: Content type declared by the caller.
    """

    def __init__(self, content_type: str, reason: str = "malformed body"):
        super().__init__(
            message=f"Unable to parse '{content_type}' request body: {reason}",
            code="INVALID_REQUEST_BODY"
        )
        self.content_type = content_type
        self.reason = reason
