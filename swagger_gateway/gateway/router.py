"""FastAPI router forwarding every request described by the schema."""

from typing import Annotated

import httpx
from fastapi import APIRouter, Depends, Header, Request
from starlette.responses import Response

from swagger_gateway.config import get_settings
from swagger_gateway.dependencies import get_http_client, get_schema
from swagger_gateway.schema.models import ServiceSchema

from .service import collect_values, generate_request_id, proxy_request


router = APIRouter(tags=["gateway"])

PROXY_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]


@router.api_route("/{full_path:path}", methods=PROXY_METHODS)
async def proxy_endpoint(
    request: Request,
    schema: Annotated[ServiceSchema, Depends(get_schema)],
    client: Annotated[httpx.AsyncClient, Depends(get_http_client)],
    x_request_id: Annotated[str | None, Header()] = None,
) -> Response:
    """Resolve the inbound request against the schema and proxy it.

    Raises:
        EndpointNotFoundError: If no endpoint matches the path.
        OperationNotFoundError: If the endpoint doesn't declare the method.
        InvalidRequestBodyError: If the body can't be parsed.
    """
    # Resolve on the undecoded path so each segment is unquoted exactly once
    raw_path = request.scope.get("raw_path")
    path = raw_path.decode("latin-1").split("?", 1)[0] if raw_path else request.url.path
    endpoint, operation, path_values = schema.resolve(request.method, path)
    values = await collect_values(request, endpoint, operation, path_values)

    return await proxy_request(
        client=client,
        schema=schema,
        endpoint=endpoint,
        operation=operation,
        values=values,
        request_id=x_request_id or generate_request_id(),
        timeout=get_settings().BACKEND_TIMEOUT_SECONDS,
    )
