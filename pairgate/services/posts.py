"""Admin post board stored newest-first in the ``posts`` collection."""

import uuid
from datetime import UTC, datetime
from typing import Any

from pairgate.errors import NotFound, StoreUnavailable
from pairgate.logging_config import get_logger
from pairgate.store import POSTS, JsonFileStore

logger = get_logger(__name__)

POST_TIME_FORMAT = "%Y-%m-%d %H:%M"

DEFAULT_POSTS: list[dict[str, Any]] = [
    {
        "id": "1",
        "title": "Welcome",
        "content": "Pair your device from the dashboard to get started.",
        "type": "alert",
    },
    {
        "id": "2",
        "title": "Channel updates",
        "content": "New features and maintenance notices are posted here.",
        "type": "update",
    },
]


def default_posts(now: datetime | None = None) -> list[dict[str, Any]]:
    """Seed posts stamped with the current time."""
    now = now or datetime.now(UTC)
    return [{**post, "time": now.strftime(POST_TIME_FORMAT)} for post in DEFAULT_POSTS]


async def list_posts(store: JsonFileStore) -> list[dict[str, Any]]:
    posts = await store.load(POSTS, default=[])
    if not isinstance(posts, list):
        raise StoreUnavailable("Post collection is not a list")
    return posts


async def create_post(
    store: JsonFileStore,
    fields: dict[str, Any],
    now: datetime | None = None,
) -> dict[str, Any]:
    """Store a post at the front of the board.

    ``id`` and ``time`` are always assigned here, overriding caller values.
    """
    now = now or datetime.now(UTC)
    post = {
        **fields,
        "id": str(uuid.uuid4()),
        "time": now.strftime(POST_TIME_FORMAT),
    }

    async with store.transaction(POSTS):
        posts = await list_posts(store)
        posts.insert(0, post)
        await store.save(POSTS, posts)

    logger.info("Post saved", post_id=post["id"])
    return post


async def delete_post(store: JsonFileStore, post_id: str) -> int:
    """Remove every post with ``post_id``.

    Returns:
        Number of posts removed (0 for an unknown id).

    Raises:
        NotFound: If the post collection has never been written.
    """
    async with store.transaction(POSTS):
        if not await store.exists(POSTS):
            raise NotFound("No posts found")
        posts = await list_posts(store)
        remaining = [post for post in posts if post.get("id") != post_id]
        await store.save(POSTS, remaining)

    removed = len(posts) - len(remaining)
    logger.info("Post deleted", post_id=post_id, removed=removed)
    return removed
