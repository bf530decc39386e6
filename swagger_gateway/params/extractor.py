"""Extract declared parameters from the values available for a request.

The extractor walks the declarations of one scope in order and builds an
:class:`ExtractedParameterSet`. The first failure aborts extraction and is
raised; nothing is collected after it.
"""

import json
import math
import re
from typing import Any, Iterable, Mapping

from swagger_gateway.schema.models import (
    BodyParameter,
    BodySchema,
    Endpoint,
    FormDataParameter,
    HeaderParameter,
    Operation,
    Parameter,
    PathParameter,
    QueryParameter,
)

from .exceptions import (
    InvalidParameterType,
    MissingRequiredBodyField,
    MissingRequiredParameter,
    UnsupportedParameterType,
)
from .merger import merge
from .models import ExtractedParameterSet, MergedParameterSet


_INTEGER_RE = re.compile(r"[+-]?[0-9]+")
_NUMBER_RE = re.compile(r"[+-]?([0-9]+(\.[0-9]*)?|\.[0-9]+)([eE][+-]?[0-9]+)?")


def describe_value(value: Any) -> str:
    """Render a received value for use in an error message."""
    try:
        return json.dumps(value, default=str)
    except (TypeError, ValueError):
        return repr(value)


def coerce_value(name: str, value: Any, type: str) -> str:
    """Convert a value to the string wire form of its declared type.

    Args:
        name: Parameter name, for error reporting.
        value: The received value.
        type: Declared primitive type.

    Returns:
        Canonical string form of the value.

    Raises:
        InvalidParameterType: If the value can't represent the type.
        UnsupportedParameterType: If the type has no wire encoding.
    """
    if type == "string":
        if isinstance(value, str):
            return value
    elif type == "integer":
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        if isinstance(value, str) and _INTEGER_RE.fullmatch(value):
            return str(int(value))
    elif type == "number":
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        if isinstance(value, float) and math.isfinite(value):
            return repr(value)
        if isinstance(value, str):
            if _INTEGER_RE.fullmatch(value):
                return str(int(value))
            if _NUMBER_RE.fullmatch(value):
                number = float(value)
                if math.isfinite(number):
                    return repr(number)
    elif type == "boolean":
        if isinstance(value, bool):
            return "true" if value else "false"
        if value in ("true", "false"):
            return value
    else:
        raise UnsupportedParameterType(type, name)

    raise InvalidParameterType(name, describe_value(value), type)


def _project_body(source: Mapping[str, Any], schema: BodySchema) -> dict[str, Any]:
    """Re-key a mapping onto the properties declared by a body schema."""
    body: dict[str, Any] = {}
    for prop in schema.properties:
        value = source.get(prop)
        if value is None:
            if prop in schema.required:
                raise MissingRequiredBodyField(prop)
            continue
        body[prop] = value
    return body


def _extract_body(
    declaration: BodyParameter,
    values: Mapping[str, Any],
    params: ExtractedParameterSet,
) -> None:
    schema = declaration.body_schema

    if schema is not None and declaration.name == "body":
        params.body = _project_body(values, schema)
        return

    value = values.get(declaration.name)
    if value is None:
        if declaration.required:
            raise MissingRequiredParameter(declaration.name)
        return

    if schema is None:
        params.body = value
        return

    # A body parameter named other than "body" aliases a top-level value
    if not isinstance(value, Mapping):
        raise InvalidParameterType(declaration.name, describe_value(value), "object")
    params.body = _project_body(value, schema)


def _extract_wire(
    declaration: HeaderParameter | QueryParameter | PathParameter | FormDataParameter,
    values: Mapping[str, Any],
    slot: dict[str, Any],
) -> None:
    value = values.get(declaration.name)
    if value is None:
        if declaration.required:
            raise MissingRequiredParameter(declaration.name)
        return

    if declaration.type is not None:
        value = coerce_value(declaration.name, value, declaration.type)
    slot[declaration.name] = value


def extract(
    declarations: Iterable[Parameter],
    values: Mapping[str, Any],
) -> ExtractedParameterSet:
    """Extract one scope's declared parameters from the available values.

    Args:
        declarations: Parameter declarations, processed in order.
        values: Flat mapping of everything located for the request.

    Returns:
        ExtractedParameterSet partitioned by location.

    Raises:
        MissingRequiredParameter: If a required parameter is absent.
        MissingRequiredBodyField: If a required body property is absent.
        InvalidParameterType: If a value doesn't fit its declared type.
        UnsupportedParameterType: If a declared type has no wire encoding.
    """
    params = ExtractedParameterSet()

    for declaration in declarations:
        if isinstance(declaration, BodyParameter):
            _extract_body(declaration, values, params)
        elif isinstance(declaration, HeaderParameter):
            _extract_wire(declaration, values, params.header)
        elif isinstance(declaration, QueryParameter):
            _extract_wire(declaration, values, params.query)
        elif isinstance(declaration, PathParameter):
            _extract_wire(declaration, values, params.path)
        elif isinstance(declaration, FormDataParameter):
            _extract_wire(declaration, values, params.formdata)
        else:
            raise TypeError(f"unknown parameter declaration: {declaration!r}")

    return params


def extract_parameters(
    endpoint: Endpoint,
    operation: Operation,
    values: Mapping[str, Any],
) -> MergedParameterSet:
    """Extract endpoint and operation parameters and merge them.

    Operation-level declarations override endpoint-level ones sharing the
    same name and location.

    Args:
        endpoint: Endpoint holding the shared declarations.
        operation: Operation holding its own declarations.
        values: Flat mapping of everything located for the request.

    Returns:
        MergedParameterSet for the backend call.
    """
    endpoint_params = extract(endpoint.parameters, values)
    operation_params = extract(operation.parameters, values)
    return merge(endpoint_params, operation_params, extra=values)
