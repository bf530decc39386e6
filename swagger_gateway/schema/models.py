"""In-memory model of a Swagger 2.0 document.

Parameter declarations form a closed set of variants discriminated on
``location``. Body declarations carry an optional ``body_schema``; its
presence decides whether the body is projected onto declared properties or
bound as a raw value.
"""

import re
from enum import Enum
from typing import Annotated, Any, Literal, Union
from urllib.parse import unquote

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from .exceptions import EndpointNotFoundError, OperationNotFoundError


PRIMITIVE_TYPES = frozenset({"string", "number", "integer", "boolean"})

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch")


class ParameterLocation(str, Enum):
    """Where a parameter is expected to be found in the inbound request."""

    header = "header"
    query = "query"
    path = "path"
    formdata = "formdata"
    body = "body"


class BodySchema(BaseModel):
    """Object schema of a body parameter.

    Attributes:
        properties: Property name to property schema, in declaration order.
        required: Names of the properties that must be present.
    """

    model_config = ConfigDict(frozen=True)

    properties: dict[str, dict[str, Any]] = Field(default_factory=dict)
    required: tuple[str, ...] = ()


class _WireParameter(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    required: bool = False
    type: str | None = None


class HeaderParameter(_WireParameter):
    location: Literal[ParameterLocation.header] = ParameterLocation.header


class QueryParameter(_WireParameter):
    location: Literal[ParameterLocation.query] = ParameterLocation.query


class PathParameter(_WireParameter):
    location: Literal[ParameterLocation.path] = ParameterLocation.path
    # Swagger requires path parameters
    required: bool = True


class FormDataParameter(_WireParameter):
    location: Literal[ParameterLocation.formdata] = ParameterLocation.formdata


class BodyParameter(BaseModel):
    """Body parameter declaration.

    Attributes:
        name: ``"body"`` binds the whole body, any other name binds the
            inbound value of that name.
        required: Whether the parameter must be supplied.
        body_schema: Object schema to project the body onto, if any.
    """

    model_config = ConfigDict(frozen=True)

    location: Literal[ParameterLocation.body] = ParameterLocation.body
    name: str = "body"
    required: bool = False
    body_schema: BodySchema | None = None


Parameter = Annotated[
    Union[HeaderParameter, QueryParameter, PathParameter, FormDataParameter, BodyParameter],
    Field(discriminator="location"),
]


class ResponseSpec(BaseModel):
    """Declared response for one status code (or ``default``)."""

    description: str = ""
    schema_: dict[str, Any] | None = Field(default=None, alias="schema")

    model_config = ConfigDict(populate_by_name=True)


class Operation(BaseModel):
    """One HTTP method under an endpoint."""

    method: str
    operation_id: str | None = None
    parameters: list[Parameter] = Field(default_factory=list)
    responses: dict[str, ResponseSpec] = Field(default_factory=dict)
    consumes: list[str] = Field(default_factory=list)
    produces: list[str] = Field(default_factory=list)

    def response_for(self, status_code: int) -> ResponseSpec | None:
        """Get the response declaration matching a status code, else ``default``."""
        return self.responses.get(str(status_code)) or self.responses.get("default")


class Endpoint(BaseModel):
    """A path template with its shared parameters and operations."""

    path: str
    parameters: list[Parameter] = Field(default_factory=list)
    operations: dict[str, Operation] = Field(default_factory=dict)

    _pattern: re.Pattern[str] = PrivateAttr()

    def model_post_init(self, __context: Any) -> None:
        parts = re.split(r"(\{[^}/]+\})", self.path)
        regex = "".join(
            "([^/]+)" if part.startswith("{") else re.escape(part)
            for part in parts
        )
        self._pattern = re.compile(f"^{regex}/?$")

    @property
    def path_names(self) -> list[str]:
        return re.findall(r"\{([^}/]+)\}", self.path)

    def match_path(self, path: str) -> dict[str, str] | None:
        """Match a path (relative to the base path) against the template.

        Returns:
            Path values keyed by template name, or None if it doesn't match.
        """
        match = self._pattern.match(path)
        if match is None:
            return None
        return {
            name: unquote(value)
            for name, value in zip(self.path_names, match.groups())
        }


class ServiceSchema(BaseModel):
    """A loaded Swagger document."""

    host: str = ""
    base_path: str = ""
    schemes: list[str] = Field(default_factory=list)
    consumes: list[str] = Field(default_factory=list)
    produces: list[str] = Field(default_factory=list)
    definitions: dict[str, Any] = Field(default_factory=dict)
    endpoints: list[Endpoint] = Field(default_factory=list)

    def resolve(self, method: str, path: str) -> tuple[Endpoint, Operation, dict[str, str]]:
        """Find the endpoint and operation an inbound request targets.

        Args:
            method: HTTP method of the inbound request.
            path: Inbound request path as sent, still percent-encoded and
                including the base path.

        Returns:
            Tuple of endpoint, operation and the path values.

        Raises:
            EndpointNotFoundError: If no endpoint template matches the path.
            OperationNotFoundError: If the endpoint has no such method.
        """
        base = self.base_path.rstrip("/")
        if base:
            if path != base and not path.startswith(base + "/"):
                raise EndpointNotFoundError(path)
            path = path[len(base):] or "/"

        matches = []
        for endpoint in self.endpoints:
            path_values = endpoint.match_path(path)
            if path_values is not None:
                matches.append((endpoint, path_values))
        if not matches:
            raise EndpointNotFoundError(path)

        # Literal segments beat placeholders, ties go to document order
        endpoint, path_values = min(matches, key=lambda m: len(m[0].path_names))
        operation = endpoint.operations.get(method.lower())
        if operation is None:
            raise OperationNotFoundError(method, endpoint.path)
        return endpoint, operation, path_values
