"""Gateway module - inbound request handling and proxying."""

from .exceptions import InvalidRequestBodyError
from .service import collect_values, proxy_request, read_body
from .router import router


__all__ = [
    # Exceptions
    "InvalidRequestBodyError",
    # Service
    "collect_values",
    "proxy_request",
    "read_body",
    # Router
    "router",
]
