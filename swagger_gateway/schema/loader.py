"""Swagger 2.0 document loader."""

from pathlib import Path
from typing import Any

import structlog
import yaml

from swagger_gateway.params.exceptions import UnsupportedParameterType

from .exceptions import SchemaLoadError
from .models import (
    HTTP_METHODS,
    PRIMITIVE_TYPES,
    BodyParameter,
    BodySchema,
    Endpoint,
    FormDataParameter,
    HeaderParameter,
    Operation,
    Parameter,
    PathParameter,
    QueryParameter,
    ResponseSpec,
    ServiceSchema,
)

logger = structlog.get_logger("schema")


_WIRE_PARAMETERS = {
    "header": HeaderParameter,
    "query": QueryParameter,
    "path": PathParameter,
    "formData": FormDataParameter,
}


def load_schema(schema_path: str | Path) -> ServiceSchema:
    """Load a Swagger document from a YAML or JSON file.

    Args:
        schema_path: Path of the document.

    Returns:
        Parsed ServiceSchema.

    Raises:
        SchemaLoadError: If the file is missing or malformed.
        UnsupportedParameterType: If a parameter declares a type that can't
            be encoded on the wire.
    """
    schema_path = Path(schema_path)
    if not schema_path.exists():
        raise SchemaLoadError(str(schema_path), "file not found")

    try:
        with schema_path.open("r", encoding="utf-8") as handle:
            document = yaml.safe_load(handle) or {}
    except yaml.YAMLError as e:
        raise SchemaLoadError(str(schema_path), str(e)) from e

    schema = parse_schema(document, source=str(schema_path))
    logger.info(
        "schema_loaded",
        path=str(schema_path),
        endpoints=len(schema.endpoints),
        operations=sum(len(e.operations) for e in schema.endpoints),
    )
    return schema


def parse_schema(document: dict[str, Any], source: str = "<document>") -> ServiceSchema:
    """Build a ServiceSchema from a parsed Swagger document."""
    if not isinstance(document, dict):
        raise SchemaLoadError(source, "document must be a mapping")
    swagger_version = str(document.get("swagger", ""))
    if not swagger_version.startswith("2"):
        raise SchemaLoadError(source, f"unsupported swagger version '{swagger_version}'")

    resolver = _RefResolver(document, source)
    endpoints = []
    for path, path_item in (document.get("paths") or {}).items():
        path_item = resolver.resolve(path_item or {})
        operations = {}
        for method in HTTP_METHODS:
            spec = path_item.get(method)
            if spec is None:
                continue
            operations[method] = Operation(
                method=method,
                operation_id=spec.get("operationId"),
                parameters=_parse_parameters(spec.get("parameters", []), resolver),
                responses={
                    str(status): ResponseSpec(**resolver.resolve(response or {}))
                    for status, response in (spec.get("responses") or {}).items()
                },
                consumes=spec.get("consumes", document.get("consumes", [])),
                produces=spec.get("produces", document.get("produces", [])),
            )
        endpoints.append(
            Endpoint(
                path=path,
                parameters=_parse_parameters(path_item.get("parameters", []), resolver),
                operations=operations,
            )
        )

    return ServiceSchema(
        host=document.get("host", ""),
        base_path=document.get("basePath", ""),
        schemes=document.get("schemes", []),
        consumes=document.get("consumes", []),
        produces=document.get("produces", []),
        definitions=document.get("definitions", {}),
        endpoints=endpoints,
    )


def _parse_parameters(raw_parameters: list[Any], resolver: "_RefResolver") -> list[Parameter]:
    parameters: list[Parameter] = []
    seen: set[tuple[str, str]] = set()

    for raw in raw_parameters:
        raw = resolver.resolve(raw)
        name = raw.get("name")
        location = raw.get("in")
        if not name or not location:
            raise SchemaLoadError(resolver.source, f"parameter without name or location: {raw!r}")
        if (name, location) in seen:
            raise SchemaLoadError(resolver.source, f"duplicate parameter '{name}' in {location}")
        seen.add((name, location))

        if location == "body":
            parameters.append(
                BodyParameter(
                    name=name,
                    required=raw.get("required", False),
                    body_schema=_parse_body_schema(raw.get("schema"), resolver),
                )
            )
            continue

        parameter_class = _WIRE_PARAMETERS.get(location)
        if parameter_class is None:
            raise SchemaLoadError(resolver.source, f"unknown parameter location '{location}'")
        param_type = raw.get("type")
        if param_type is not None and param_type not in PRIMITIVE_TYPES:
            raise UnsupportedParameterType(param_type, name)
        parameters.append(
            parameter_class(name=name, required=raw.get("required", location == "path"), type=param_type)
        )

    return parameters


def _parse_body_schema(raw_schema: Any, resolver: "_RefResolver") -> BodySchema | None:
    if not raw_schema:
        return None
    raw_schema = resolver.resolve(raw_schema)
    properties = raw_schema.get("properties")
    if not isinstance(properties, dict):
        return None
    return BodySchema(
        properties={name: prop or {} for name, prop in properties.items()},
        required=tuple(raw_schema.get("required", [])),
    )


class _RefResolver:
    """Follows local JSON references (``#/...``) inside a document."""

    def __init__(self, document: dict[str, Any], source: str):
        self.document = document
        self.source = source

    def resolve(self, node: Any) -> Any:
        seen: set[str] = set()
        while isinstance(node, dict) and "$ref" in node:
            ref = node["$ref"]
            if ref in seen:
                raise SchemaLoadError(self.source, f"circular $ref: {ref}")
            seen.add(ref)
            node = self._lookup(ref)
        return node

    def _lookup(self, ref: str) -> Any:
        if not ref.startswith("#/"):
            raise SchemaLoadError(self.source, f"unsupported $ref (only '#/' supported): {ref}")
        current: Any = self.document
        for part in ref[2:].split("/"):
            part = part.replace("~1", "/").replace("~0", "~")
            if not isinstance(current, dict) or part not in current:
                raise SchemaLoadError(self.source, f"broken $ref pointer: {ref}")
            current = current[part]
        return current
