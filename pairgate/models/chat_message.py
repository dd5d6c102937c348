"""In-memory chat message."""

from datetime import datetime

from pydantic import BaseModel


class ChatMessage(BaseModel):
    id: str
    user: str
    message: str | None
    timestamp: datetime
    avatar: str
