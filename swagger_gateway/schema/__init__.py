"""Schema module - Swagger document model and loader."""

from .exceptions import (
    SchemaError,
    SchemaLoadError,
    EndpointNotFoundError,
    OperationNotFoundError,
)
from .models import (
    ParameterLocation,
    BodySchema,
    HeaderParameter,
    QueryParameter,
    PathParameter,
    FormDataParameter,
    BodyParameter,
    Parameter,
    ResponseSpec,
    Operation,
    Endpoint,
    ServiceSchema,
)
from .loader import load_schema, parse_schema


__all__ = [
    # Exceptions
    "SchemaError",
    "SchemaLoadError",
    "EndpointNotFoundError",
    "OperationNotFoundError",
    # Models
    "ParameterLocation",
    "BodySchema",
    "HeaderParameter",
    "QueryParameter",
    "PathParameter",
    "FormDataParameter",
    "BodyParameter",
    "Parameter",
    "ResponseSpec",
    "Operation",
    "Endpoint",
    "ServiceSchema",
    # Loader
    "load_schema",
    "parse_schema",
]
