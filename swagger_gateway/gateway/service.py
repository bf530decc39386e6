"""Service layer tying parameter extraction, backend execution and relay together."""

import uuid
from typing import Any

import httpx
import structlog
from fastapi import Request
from starlette.responses import Response

from swagger_gateway.params.exceptions import ExtractionError, ParameterError
from swagger_gateway.params.extractor import extract_parameters
from swagger_gateway.proxy.client import DEFAULT_TIMEOUT_SECONDS
from swagger_gateway.proxy.exceptions import ExecutionError
from swagger_gateway.proxy.executor import execute_request
from swagger_gateway.proxy.relay import relay
from swagger_gateway.schema.models import Endpoint, HeaderParameter, Operation, ServiceSchema

from .exceptions import InvalidRequestBodyError

logger = structlog.get_logger("gateway")


FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def generate_request_id() -> str:
    """Generate a unique request ID for tracing."""
    return str(uuid.uuid4())


async def read_body(request: Request) -> Any:
    """Parse the inbound body according to its content type.

    Returns:
        Parsed JSON value, a dict of form fields, or None when there is no
        body or its content type isn't parsed.

    Raises:
        InvalidRequestBodyError: If a JSON body is malformed.
    """
    content_type = request.headers.get("content-type", "")
    media_type = content_type.split(";", 1)[0].strip().lower()

    if media_type == "application/json" or media_type.endswith("+json"):
        raw = await request.body()
        if not raw:
            return None
        try:
            return await request.json()
        except ValueError as e:
            raise InvalidRequestBodyError(content_type, str(e)) from e

    if media_type in FORM_CONTENT_TYPES:
        form = await request.form()
        return {key: value for key, value in form.multi_items()}

    return None


async def collect_values(
    request: Request,
    endpoint: Endpoint,
    operation: Operation,
    path_values: dict[str, str],
) -> dict[str, Any]:
    """Assemble the flat map of values available for a request.

    Sources are layered in order: declared headers, query arguments, body
    fields, path values. Later sources win on name clashes.
    """
    values: dict[str, Any] = {}

    # Header lookup is case-insensitive, store under the declared name
    for declaration in (*endpoint.parameters, *operation.parameters):
        if isinstance(declaration, HeaderParameter):
            header = request.headers.get(declaration.name)
            if header is not None:
                values[declaration.name] = header

    for key in request.query_params.keys():
        args = request.query_params.getlist(key)
        values[key] = args[0] if len(args) == 1 else args

    body = await read_body(request)
    if isinstance(body, dict):
        values.update(body)
    elif body is not None:
        values["_json"] = body

    values.update(path_values)
    return values


async def proxy_request(
    client: httpx.AsyncClient,
    schema: ServiceSchema,
    endpoint: Endpoint,
    operation: Operation,
    values: dict[str, Any],
    request_id: str | None = None,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> Response:
    """Proxy one inbound request to the backend.

    This is the main entry point for a resolved request. It:
    1. Extracts endpoint and operation parameters and merges them
    2. Calls the backend with the merged parameters
    3. Relays the backend reply, or the failure, to the caller

    Args:
        client: HTTP client for backend requests.
        schema: Loaded schema.
        endpoint: Endpoint the request resolved to.
        operation: Operation the request resolved to.
        values: Values available for the request.
        request_id: Correlation ID for tracing.
        timeout: Backend request timeout.

    Returns:
        Response to send to the caller.

    Raises:
        ParameterError: If a parameter fault isn't caused by the request.
    """
    request_id = request_id or generate_request_id()

    outcome: Any
    try:
        params = extract_parameters(endpoint, operation, values)
        outcome = await execute_request(
            client=client,
            schema=schema,
            endpoint=endpoint,
            operation=operation,
            params=params,
            timeout=timeout,
            request_id=request_id,
        )
    except ExtractionError as e:
        logger.info("parameters_rejected", request_id=request_id, code=e.code, reason=e.message)
        outcome = e
    except (ParameterError, ExecutionError) as e:
        outcome = e

    result = relay(outcome)
    if result is None:
        return outcome.response

    return Response(
        content=result.body,
        status_code=result.status_code,
        media_type=result.content_type,
    )
