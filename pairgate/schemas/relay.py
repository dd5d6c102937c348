"""Upstream relay request schemas."""

from pydantic import BaseModel, Field


class AIRequest(BaseModel):
    message: str = Field(..., min_length=1)


class ImageRequest(BaseModel):
    prompt: str = Field(..., min_length=1)
