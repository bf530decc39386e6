"""Outcomes of a backend call and the relayed response."""

from pydantic import BaseModel, ConfigDict, Field
from starlette.responses import Response


class BackendResponse(BaseModel):
    """A normalized backend response.

    Attributes:
        status_code: Status returned by the backend.
        content_type: Content type returned by the backend, if any.
        body: Raw response body.
    """

    status_code: int = Field(..., description="Backend status code")
    content_type: str | None = Field(default=None, description="Backend content type")
    body: bytes = Field(default=b"", description="Backend response body")


class AlreadySent(BaseModel):
    """The backend reply was handed to the caller while it was being received.

    Attributes:
        response: Streaming response already bound to the backend reply.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    response: Response


class RelayResponse(BaseModel):
    """The final response sent back to the caller."""

    status_code: int
    content_type: str
    body: bytes = b""
