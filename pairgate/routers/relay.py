"""Upstream relay router.

Forwards requests to third-party APIs and relays their bodies unchanged.
"""

from typing import Any

from fastapi import APIRouter, Query
from fastapi.responses import Response

from pairgate.schemas.common import ErrorResponse
from pairgate.schemas.relay import AIRequest, ImageRequest
from pairgate.services import upstream

router = APIRouter(
    prefix="/api",
    tags=["relay"],
    responses={500: {"model": ErrorResponse, "description": "Upstream unavailable"}},
)


@router.post("/ai")
async def ai_chat(body: AIRequest) -> Any:
    return await upstream.ask_ai(body.message)


@router.get("/song")
async def song_search(query: str = Query(..., min_length=1)) -> Any:
    return await upstream.search_song(query)


@router.post("/image", response_class=Response)
async def image_generate(body: ImageRequest) -> Response:
    content = await upstream.generate_image(body.prompt)
    return Response(content=content, media_type=upstream.DEFAULT_IMAGE_TYPE)


@router.get("/tiktok")
async def tiktok_lookup(username: str = Query(..., min_length=1)) -> Any:
    return await upstream.lookup_tiktok(username)


@router.get("/pies/{category}", response_class=Response)
async def pies_image(category: str) -> Response:
    content = await upstream.fetch_pies(category)
    return Response(content=content, media_type=upstream.DEFAULT_IMAGE_TYPE)
