"""Post board schemas."""

from pydantic import BaseModel, ConfigDict


class PostCreateRequest(BaseModel):
    """Free-form post fields; ``id`` and ``time`` are assigned by the server."""

    model_config = ConfigDict(extra="allow")

    title: str | None = None
    content: str | None = None
    icon: str | None = None
    type: str | None = None
