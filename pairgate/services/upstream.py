"""Upstream relay service.

Thin wrappers around the third-party APIs the gateway fronts. Each call
opens a short-lived ``httpx.AsyncClient``; every failure (transport
error, non-2xx status, undecodable JSON) is logged and raised as an
``UpstreamError`` carrying the endpoint's public message.
"""

from typing import Any

import httpx

from pairgate.config import settings
from pairgate.errors import UpstreamError
from pairgate.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_IMAGE_TYPE = "image/png"


async def _get(url: str, params: dict[str, str] | None, error_message: str) -> httpx.Response:
    try:
        async with httpx.AsyncClient(
            timeout=settings.upstream_timeout_seconds,
            follow_redirects=True,
        ) as client:
            resp = await client.get(url, params=params)
            resp.raise_for_status()
            return resp
    except httpx.HTTPError as exc:
        logger.warning("Upstream request failed", url=url, error=str(exc))
        raise UpstreamError(error_message) from exc


async def fetch_json(
    url: str,
    params: dict[str, str] | None = None,
    error_message: str | None = None,
) -> Any:
    """GET ``url`` and return the decoded JSON body."""
    error_message = error_message or UpstreamError.default_message
    resp = await _get(url, params, error_message)
    try:
        return resp.json()
    except ValueError as exc:
        logger.warning("Upstream returned invalid JSON", url=url, error=str(exc))
        raise UpstreamError(error_message) from exc


async def fetch_bytes(
    url: str,
    params: dict[str, str] | None = None,
    error_message: str | None = None,
) -> bytes:
    """GET ``url`` and return the raw body."""
    resp = await _get(url, params, error_message or UpstreamError.default_message)
    return resp.content


async def ask_ai(message: str) -> Any:
    return await fetch_json(
        settings.ai_upstream_url,
        params={"q": message},
        error_message="AI service unavailable",
    )


async def search_song(query: str) -> Any:
    return await fetch_json(
        settings.song_upstream_url,
        params={"query": query},
        error_message="Song service unavailable",
    )


async def generate_image(prompt: str) -> bytes:
    return await fetch_bytes(
        settings.image_upstream_url,
        params={"apikey": settings.image_upstream_api_key, "query": prompt},
        error_message="Image generation failed",
    )


async def lookup_tiktok(username: str) -> Any:
    return await fetch_json(
        settings.tiktok_upstream_url,
        params={"username": username},
        error_message="TikTok service unavailable",
    )


async def fetch_pies(category: str) -> bytes:
    return await fetch_bytes(
        f"{settings.pies_upstream_url.rstrip('/')}/{category}",
        error_message="Pies service unavailable",
    )
