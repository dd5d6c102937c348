"""Admin post board router."""

from typing import Any

from fastapi import APIRouter, Depends

from pairgate.errors import StoreUnavailable
from pairgate.schemas.common import ErrorResponse, SuccessResponse
from pairgate.schemas.posts import PostCreateRequest
from pairgate.services.posts import create_post, delete_post, list_posts
from pairgate.store import JsonFileStore, get_store

router = APIRouter(
    prefix="/api/posts",
    tags=["posts"],
)


@router.get("", response_model=list[dict[str, Any]])
async def get_posts(
    store: JsonFileStore = Depends(get_store),
) -> list[dict[str, Any]]:
    """List posts, newest first."""
    try:
        return await list_posts(store)
    except StoreUnavailable as exc:
        raise StoreUnavailable("Failed to load posts") from exc


@router.post("", response_model=SuccessResponse)
async def save_post(
    body: PostCreateRequest,
    store: JsonFileStore = Depends(get_store),
) -> SuccessResponse:
    try:
        await create_post(store, body.model_dump(exclude_none=True))
    except StoreUnavailable as exc:
        raise StoreUnavailable("Failed to save post") from exc

    return SuccessResponse(message="Post saved successfully!")


@router.delete(
    "/{post_id}",
    response_model=SuccessResponse,
    responses={404: {"model": ErrorResponse, "description": "No posts found"}},
)
async def remove_post(
    post_id: str,
    store: JsonFileStore = Depends(get_store),
) -> SuccessResponse:
    """Delete a post by id. Unknown ids are not an error."""
    try:
        await delete_post(store, post_id)
    except StoreUnavailable as exc:
        raise StoreUnavailable("Failed to delete post") from exc

    return SuccessResponse(message="Post deleted successfully!")
