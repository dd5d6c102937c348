"""Pairing code router.

Issues pair codes for a phone number and consumes them once. Both
endpoints take their single field from a JSON object or a form body; a
missing or unreadable body counts as a missing field, so callers always
get the endpoint's own error (400 invalid number, 404 unknown code).
"""

import json
from typing import Any

from fastapi import APIRouter, Depends, Request

from pairgate.errors import StoreUnavailable
from pairgate.logging_config import get_logger
from pairgate.middleware.rate_limit import ISSUE_PAIR_LIMIT, VERIFY_PAIR_LIMIT, limiter
from pairgate.schemas.common import ErrorResponse
from pairgate.schemas.pairing import (
    PairCodeRequest,
    PairCodeResponse,
    VerifyPairRequest,
    VerifyPairResponse,
)
from pairgate.services.pairing import issue_pair_code, verify_pair_code
from pairgate.store import JsonFileStore, get_store

logger = get_logger(__name__)

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")

router = APIRouter(
    prefix="/api",
    tags=["pairing"],
)


async def read_body_fields(request: Request) -> dict[str, Any]:
    """Return the request's JSON object or form fields, ``{}`` if there are none."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(FORM_CONTENT_TYPES):
        form = await request.form()
        return dict(form)

    raw = await request.body()
    if not raw:
        return {}
    try:
        data = json.loads(raw)
    except ValueError:
        logger.debug("Ignoring undecodable pairing request body", path=request.url.path)
        return {}
    return data if isinstance(data, dict) else {}


async def pair_code_request(
    fields: dict[str, Any] = Depends(read_body_fields),
) -> PairCodeRequest:
    return PairCodeRequest.model_validate(fields)


async def verify_pair_request(
    fields: dict[str, Any] = Depends(read_body_fields),
) -> VerifyPairRequest:
    return VerifyPairRequest.model_validate(fields)


@router.post(
    "/pair",
    response_model=PairCodeResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid phone number"},
        500: {"model": ErrorResponse, "description": "Record store unavailable"},
    },
)
@limiter.limit(ISSUE_PAIR_LIMIT)
async def issue_pair(
    request: Request,
    body: PairCodeRequest = Depends(pair_code_request),
    store: JsonFileStore = Depends(get_store),
) -> PairCodeResponse:
    """Generate an 8-character pair code valid for `pair_code_ttl_hours` (24 by default)."""
    try:
        record, message = await issue_pair_code(store, body.number)
    except StoreUnavailable as exc:
        raise StoreUnavailable("Failed to generate pair code") from exc

    return PairCodeResponse(code=record.code, message=message)


@router.post(
    "/verify-pair",
    response_model=VerifyPairResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Invalid or expired pair code"},
        500: {"model": ErrorResponse, "description": "Verification failed"},
    },
)
@limiter.limit(VERIFY_PAIR_LIMIT)
async def verify_pair(
    request: Request,
    body: VerifyPairRequest = Depends(verify_pair_request),
    store: JsonFileStore = Depends(get_store),
) -> VerifyPairResponse:
    """Consume a pair code and return the phone number it was issued for.

    Unknown, already used and expired codes all return the same 404.
    """
    try:
        pair = await verify_pair_code(store, body.code)
    except StoreUnavailable as exc:
        raise StoreUnavailable("Verification failed") from exc

    return VerifyPairResponse(
        number=pair.number,
        message="Pair code verified successfully!",
    )
