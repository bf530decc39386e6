"""Proxy module - backend execution and response relay."""

from .schemas import AlreadySent, BackendResponse, RelayResponse
from .exceptions import (
    ExecutionError,
    ClientError,
    RemoteRequestError,
    SchemaViolation,
)
from .client import build_backend_url, send_request, validate_response
from .executor import execute_request
from .relay import relay


__all__ = [
    # Schemas
    "AlreadySent",
    "BackendResponse",
    "RelayResponse",
    # Exceptions
    "ExecutionError",
    "ClientError",
    "RemoteRequestError",
    "SchemaViolation",
    # Client
    "build_backend_url",
    "send_request",
    "validate_response",
    # Executor
    "execute_request",
    # Relay
    "relay",
]
