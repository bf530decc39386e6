"""Execute the backend request for a resolved operation."""

import httpx
import structlog

from swagger_gateway.params.models import MergedParameterSet
from swagger_gateway.schema.models import Endpoint, Operation, ServiceSchema

from .client import DEFAULT_TIMEOUT_SECONDS, send_request
from .exceptions import ClientError, RemoteRequestError, SchemaViolation
from .schemas import AlreadySent, BackendResponse

logger = structlog.get_logger("proxy")


async def execute_request(
    client: httpx.AsyncClient,
    schema: ServiceSchema,
    endpoint: Endpoint,
    operation: Operation,
    params: MergedParameterSet,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    request_id: str | None = None,
) -> BackendResponse | AlreadySent:
    """Make a single backend call and log how it went.

    Args:
        client: Shared HTTP client.
        schema: Schema describing the backend.
        endpoint: Target endpoint.
        operation: Target operation.
        params: Merged parameters for the call.
        timeout: Backend request timeout.
        request_id: Correlation ID for tracing.

    Returns:
        BackendResponse on success, or AlreadySent if the reply was streamed.

    Raises:
        ClientError: If the request couldn't be made.
        RemoteRequestError: If the backend failed before replying usably.
        SchemaViolation: If the reply violates the declared response schema.
    """
    log = logger.bind(
        request_id=request_id,
        operation=operation.operation_id or f"{operation.method.upper()} {endpoint.path}",
    )

    try:
        outcome = await send_request(
            client=client,
            schema=schema,
            endpoint=endpoint,
            operation=operation,
            params=params,
            timeout=timeout,
            request_id=request_id,
        )
    except ClientError as e:
        log.error("client_error", backend_url=e.backend_url, reason=e.reason)
        raise
    except RemoteRequestError as e:
        log.warning("request_error", backend_url=e.backend_url, reason=e.reason)
        raise
    except SchemaViolation as e:
        log.warning("response_schema_violation", detail=e.detail)
        raise

    if isinstance(outcome, AlreadySent):
        log.info("backend_response_streamed", status_code=outcome.response.status_code)
    else:
        log.info(
            "backend_response",
            status_code=outcome.status_code,
            content_type=outcome.content_type,
        )
    return outcome
