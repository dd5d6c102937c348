"""Pairing code schemas."""

from typing import Any

from pydantic import BaseModel, Field


class PairCodeRequest(BaseModel):
    """Request schema for POST /api/pair.

    ``number`` is typed loosely so a missing or non-string value is rejected
    by the pairing service as an invalid phone number rather than as a
    malformed body.
    """

    number: Any = Field(default=None, description="Phone number to pair")


class PairCodeResponse(BaseModel):
    """Response schema for POST /api/pair."""

    success: bool = True
    code: str
    message: str


class VerifyPairRequest(BaseModel):
    """Request schema for POST /api/verify-pair."""

    code: Any = Field(default=None, description="Pair code to consume")


class VerifyPairResponse(BaseModel):
    """Response schema for POST /api/verify-pair."""

    success: bool = True
    number: str
    message: str
