"""Shared response schemas."""

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Body of every failed request."""

    error: str


class SuccessResponse(BaseModel):
    success: bool = True
    message: str
