"""Visit tracking and stats router."""

from fastapi import APIRouter, Depends

from pairgate.errors import StoreUnavailable
from pairgate.schemas.stats import StatsResponse, VisitResponse
from pairgate.services.chat_log import ChatLog, get_chat_log
from pairgate.services.visits import collect_stats, record_visit
from pairgate.store import JsonFileStore, get_store

router = APIRouter(
    prefix="/api",
    tags=["stats"],
)


@router.get("/stats", response_model=StatsResponse)
async def get_stats(
    store: JsonFileStore = Depends(get_store),
    chat_log: ChatLog = Depends(get_chat_log),
) -> StatsResponse:
    try:
        stats = await collect_stats(store, chat_log)
    except StoreUnavailable as exc:
        raise StoreUnavailable("Failed to get stats") from exc

    return StatsResponse(**stats)


@router.post("/visit", response_model=VisitResponse)
async def track_visit(
    store: JsonFileStore = Depends(get_store),
) -> VisitResponse:
    try:
        visits = await record_visit(store)
    except StoreUnavailable as exc:
        raise StoreUnavailable("Failed to track visit") from exc

    return VisitResponse(count=visits.count)
