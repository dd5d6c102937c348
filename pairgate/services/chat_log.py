"""Bounded in-memory chat log.

Process-wide state: at most ``MAX_MESSAGES`` are retained (oldest dropped
first) and reads return the last ``READ_WINDOW``. Not persisted.
"""

import asyncio
import uuid
from collections import deque
from datetime import UTC, datetime
from urllib.parse import quote

from pairgate.models.chat_message import ChatMessage

MAX_MESSAGES = 100
READ_WINDOW = 50
AVATAR_URL = "https://ui-avatars.com/api/?name={name}&background=random"


class ChatLog:
    """Chat messages guarded by a lock owned by the log."""

    def __init__(self, max_messages: int = MAX_MESSAGES, read_window: int = READ_WINDOW):
        self.read_window = read_window
        self._messages: deque[ChatMessage] = deque(maxlen=max_messages)
        self._lock = asyncio.Lock()

    async def post(
        self,
        user: str | None,
        message: str | None,
        now: datetime | None = None,
    ) -> ChatMessage:
        chat_message = ChatMessage(
            id=str(uuid.uuid4()),
            user=user or "Anonymous",
            message=message,
            timestamp=now or datetime.now(UTC),
            avatar=AVATAR_URL.format(name=quote(user or "User", safe="")),
        )
        async with self._lock:
            self._messages.append(chat_message)
        return chat_message

    async def recent(self) -> list[ChatMessage]:
        async with self._lock:
            return list(self._messages)[-self.read_window :]

    async def active_users(self) -> int:
        """Distinct authors in the current read window."""
        return len({message.user for message in await self.recent()})

    def __len__(self) -> int:
        return len(self._messages)


_chat_log: ChatLog | None = None


def get_chat_log() -> ChatLog:
    """Get or create the process-wide chat log (FastAPI dependency)."""
    global _chat_log
    if _chat_log is None:
        _chat_log = ChatLog()
    return _chat_log


def reset_chat_log() -> None:
    global _chat_log
    _chat_log = None
