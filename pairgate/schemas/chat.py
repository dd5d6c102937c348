"""Chat log schemas."""

from pydantic import BaseModel

from pairgate.models.chat_message import ChatMessage


class ChatPostRequest(BaseModel):
    user: str | None = None
    message: str | None = None


class ChatPostResponse(BaseModel):
    success: bool = True
    message: ChatMessage
