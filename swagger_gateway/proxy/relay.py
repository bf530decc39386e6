"""Map request outcomes to the response sent back to the caller."""

import structlog

from swagger_gateway.exceptions import GatewayError
from swagger_gateway.params.exceptions import (
    InvalidParameterType,
    MissingRequiredBodyField,
    MissingRequiredParameter,
)

from .exceptions import ClientError, RemoteRequestError, SchemaViolation
from .schemas import AlreadySent, BackendResponse, RelayResponse

logger = structlog.get_logger("proxy")


SERVER_ERROR_TEXT = "server error"
DEFAULT_CONTENT_TYPE = "application/octet-stream"


def _text(status_code: int, body: str) -> RelayResponse:
    return RelayResponse(
        status_code=status_code,
        content_type="text/plain",
        body=body.encode("utf-8"),
    )


def relay(outcome: BackendResponse | AlreadySent | GatewayError) -> RelayResponse | None:
    """Convert an extraction or execution outcome into the caller's response.

    Args:
        outcome: Backend result, or the fault raised while extracting
            parameters or calling the backend.

    Returns:
        RelayResponse to send, or None if the response was already sent.

    Raises:
        GatewayError: Any fault that isn't caused by the request, such as an
            unsupported parameter type, is re-raised as an internal error.
    """
    if isinstance(outcome, AlreadySent):
        return None
    if isinstance(outcome, BackendResponse):
        return RelayResponse(
            status_code=outcome.status_code,
            content_type=outcome.content_type or DEFAULT_CONTENT_TYPE,
            body=outcome.body,
        )

    if isinstance(outcome, MissingRequiredParameter):
        return _text(400, f"missing required parameter '{outcome.name}'")
    if isinstance(outcome, MissingRequiredBodyField):
        return _text(400, f"schema violation in body, missing required field '{outcome.name}'")
    if isinstance(outcome, InvalidParameterType):
        return _text(
            400,
            f"wrong type for parameter '{outcome.name}', "
            f"expected '{outcome.expected}', got '{outcome.actual}'",
        )
    if isinstance(outcome, (ClientError, RemoteRequestError)):
        return _text(500, SERVER_ERROR_TEXT)
    if isinstance(outcome, SchemaViolation):
        return _text(400, f"schema violation: {outcome.detail}")

    logger.error("internal_error", code=outcome.code, message=outcome.message)
    raise outcome
