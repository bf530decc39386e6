"""HTTP client for calling the backend described by the schema."""

import json
import uuid
from typing import Any
from urllib.parse import quote

import httpx
import jsonschema
import structlog
from starlette.background import BackgroundTask
from starlette.responses import StreamingResponse

from swagger_gateway.config import Settings, get_settings
from swagger_gateway.params.models import MergedParameterSet
from swagger_gateway.schema.models import Endpoint, Operation, ServiceSchema

from .exceptions import ClientError, RemoteRequestError, SchemaViolation
from .schemas import AlreadySent, BackendResponse

logger = structlog.get_logger("proxy")


# Default timeout for backend requests
DEFAULT_TIMEOUT_SECONDS = 30.0


def build_backend_url(
    schema: ServiceSchema,
    endpoint: Endpoint,
    path_params: dict[str, Any],
    settings: Settings | None = None,
) -> str:
    """Build the backend URL for an endpoint.

    Scheme and host come from settings when set, otherwise from the schema.
    Path placeholders are filled with URL-quoted path parameters.

    Raises:
        ClientError: If there is no host or a placeholder has no value.
    """
    settings = settings or get_settings()
    scheme = settings.BACKEND_SCHEME or (schema.schemes[0] if schema.schemes else "http")
    host = settings.BACKEND_HOST or schema.host
    path = endpoint.path
    for name in endpoint.path_names:
        if name in path_params:
            path = path.replace("{" + name + "}", quote(_wire_value(path_params[name]), safe=""))

    url = f"{scheme}://{host}{schema.base_path.rstrip('/')}{path}"
    if not host:
        raise ClientError(backend_url=url, reason="no backend host configured")
    for name in endpoint.path_names:
        if "{" + name + "}" in path:
            raise ClientError(backend_url=url, reason=f"unresolved path parameter '{name}'")
    return url


def _wire_value(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return json.dumps(value, default=str)


def _is_json(content_type: str | None) -> bool:
    if not content_type:
        return False
    media_type = content_type.split(";", 1)[0].strip().lower()
    return media_type == "application/json" or media_type.endswith("+json")


def validate_response(
    schema: ServiceSchema,
    response_schema: dict[str, Any] | None,
    backend_url: str,
    content_type: str | None,
    body: bytes,
) -> None:
    """Check a JSON backend reply against its declared schema.

    Replies without a declared schema, or that aren't JSON, are not checked.

    Raises:
        RemoteRequestError: If the reply claims to be JSON but isn't.
        SchemaViolation: If the reply doesn't match the schema.
    """
    if not response_schema or not _is_json(content_type):
        return

    try:
        data = json.loads(body)
    except ValueError as e:
        raise RemoteRequestError(backend_url=backend_url, reason=f"malformed JSON reply: {e}")

    # Local refs point into the document's definitions
    validator = jsonschema.Draft4Validator({**response_schema, "definitions": schema.definitions})
    errors = sorted(validator.iter_errors(data), key=lambda e: list(e.path))
    if errors:
        e0 = errors[0]
        path = "/".join(str(p) for p in e0.path)
        raise SchemaViolation(f"{e0.message} at {path}" if path else e0.message)


async def send_request(
    client: httpx.AsyncClient,
    schema: ServiceSchema,
    endpoint: Endpoint,
    operation: Operation,
    params: MergedParameterSet,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    request_id: str | None = None,
) -> BackendResponse | AlreadySent:
    """Call the backend for an operation with the merged parameters.

    Args:
        client: Shared HTTP client.
        schema: Schema describing the backend.
        endpoint: Target endpoint.
        operation: Target operation.
        params: Merged parameters for the call.
        timeout: Request timeout in seconds.
        request_id: Optional trace ID (generated if not provided).

    Returns:
        BackendResponse with the buffered reply, or AlreadySent when the
        reply is streamed to the caller.

    Raises:
        ClientError: If the request couldn't be made.
        RemoteRequestError: If the backend timed out or failed mid-reply.
        SchemaViolation: If the reply doesn't match the declared schema.
    """
    if request_id is None:
        request_id = str(uuid.uuid4())

    settings = get_settings()
    backend_url = build_backend_url(schema, endpoint, params.path, settings)

    headers = {name: _wire_value(value) for name, value in params.header.items()}
    headers["X-Request-ID"] = request_id

    content: dict[str, Any] = {}
    if params.body is not None:
        content["json"] = params.body
    elif params.formdata:
        content["data"] = {name: _wire_value(value) for name, value in params.formdata.items()}

    query = {
        name: [_wire_value(v) for v in value] if isinstance(value, list) else _wire_value(value)
        for name, value in params.query.items()
    }

    logger.debug(
        "backend_request",
        request_id=request_id,
        method=operation.method.upper(),
        url=backend_url,
    )

    try:
        request = client.build_request(
            operation.method.upper(),
            backend_url,
            params=query,
            headers=headers,
            timeout=timeout,
            **content,
        )
        response = await client.send(request, stream=True)

        content_type = response.headers.get("content-type")
        spec = operation.response_for(response.status_code)
        response_schema = spec.schema_ if spec else None

        if (
            settings.STREAM_UNVALIDATED_RESPONSES
            and response_schema is None
            and not _is_json(content_type)
        ):
            return AlreadySent(
                response=StreamingResponse(
                    response.aiter_bytes(),
                    status_code=response.status_code,
                    media_type=content_type,
                    background=BackgroundTask(response.aclose),
                )
            )

        try:
            body = await response.aread()
        finally:
            await response.aclose()

    except httpx.TimeoutException:
        raise RemoteRequestError(
            backend_url=backend_url,
            reason=f"timed out after {timeout}s"
        )
    except httpx.ConnectError as e:
        raise ClientError(
            backend_url=backend_url,
            reason=f"connection failed: {e}"
        )
    except (httpx.NetworkError, httpx.ProtocolError, httpx.DecodingError) as e:
        raise RemoteRequestError(
            backend_url=backend_url,
            reason=f"Request failed: {e}"
        )
    except (httpx.RequestError, httpx.InvalidURL) as e:
        raise ClientError(
            backend_url=backend_url,
            reason=f"Request failed: {e}"
        )

    validate_response(schema, response_schema, backend_url, content_type, body)

    return BackendResponse(
        status_code=response.status_code,
        content_type=content_type,
        body=body,
    )
