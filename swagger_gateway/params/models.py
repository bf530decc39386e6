"""Parameter sets produced by extraction and merging."""

from typing import Any

from pydantic import BaseModel, Field


class ExtractedParameterSet(BaseModel):
    """Parameters extracted for one scope, partitioned by location.

    Attributes:
        header: Header parameters by name.
        query: Query parameters by name.
        path: Path parameters by name.
        formdata: Form fields by name.
        body: Body value, or None when no body was bound.
    """

    header: dict[str, Any] = Field(default_factory=dict)
    query: dict[str, Any] = Field(default_factory=dict)
    path: dict[str, Any] = Field(default_factory=dict)
    formdata: dict[str, Any] = Field(default_factory=dict)
    body: Any = None


class MergedParameterSet(ExtractedParameterSet):
    """Endpoint and operation parameters reconciled for the backend call.

    Attributes:
        extra: Every value available for the request, unfiltered.
    """

    extra: dict[str, Any] = Field(default_factory=dict)
