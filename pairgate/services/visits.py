"""Visit counter and aggregate gateway stats."""

from datetime import UTC, datetime

from pydantic import ValidationError

from pairgate.errors import StoreUnavailable
from pairgate.logging_config import get_logger
from pairgate.models.visit import VisitCounter
from pairgate.services.chat_log import ChatLog
from pairgate.services.pairing import load_pairs
from pairgate.services.posts import list_posts
from pairgate.store import VISITS, JsonFileStore

logger = get_logger(__name__)


async def load_visits(store: JsonFileStore) -> VisitCounter:
    raw = await store.load(VISITS, default={})
    try:
        return VisitCounter.model_validate(raw)
    except ValidationError as exc:
        raise StoreUnavailable("Visit counter is malformed") from exc


async def record_visit(store: JsonFileStore, now: datetime | None = None) -> VisitCounter:
    """Increment the visit counter and stamp the visit time."""
    async with store.transaction(VISITS):
        visits = await load_visits(store)
        visits.count += 1
        visits.last_visit = now or datetime.now(UTC)
        await store.save(
            VISITS, visits.model_dump(mode="json", by_alias=True, exclude_none=True)
        )

    logger.debug("Visit recorded", count=visits.count)
    return visits


async def collect_stats(store: JsonFileStore, chat_log: ChatLog) -> dict[str, int]:
    """Aggregate counts across the stored collections and the chat log."""
    posts = await list_posts(store)
    visits = await load_visits(store)
    pairs = await load_pairs(store)

    return {
        "totalPosts": len(posts),
        "totalVisits": visits.count,
        "activeUsers": await chat_log.active_users(),
        "pairCodes": len(pairs),
    }
