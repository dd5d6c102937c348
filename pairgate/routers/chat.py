"""In-memory chat router."""

from fastapi import APIRouter, Depends

from pairgate.models.chat_message import ChatMessage
from pairgate.schemas.chat import ChatPostRequest, ChatPostResponse
from pairgate.services.chat_log import ChatLog, get_chat_log

router = APIRouter(
    prefix="/api/chat",
    tags=["chat"],
)


@router.get("", response_model=list[ChatMessage])
async def get_messages(
    chat_log: ChatLog = Depends(get_chat_log),
) -> list[ChatMessage]:
    """Return the most recent chat messages, oldest first."""
    return await chat_log.recent()


@router.post("", response_model=ChatPostResponse)
async def post_message(
    body: ChatPostRequest,
    chat_log: ChatLog = Depends(get_chat_log),
) -> ChatPostResponse:
    message = await chat_log.post(body.user, body.message)
    return ChatPostResponse(message=message)
