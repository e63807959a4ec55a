# chuk_ai_credit_manager/models/chat_session.py
from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from chuk_ai_credit_manager.models.message import ChatMessage, MessageRole
from chuk_ai_credit_manager.models.timestamps import UtcDatetime, as_utc, utc_now

DEFAULT_SESSION_TITLE = "New brainstorm"


def new_session_id() -> str:
    return f"chat-{uuid.uuid4().hex[:12]}"


class ChatSession(BaseModel):
    """One independent chat thread."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(default_factory=new_session_id)
    title: str = DEFAULT_SESSION_TITLE
    created_at: UtcDatetime = Field(default_factory=utc_now)
    last_activity: UtcDatetime = Field(default_factory=utc_now)
    pinned: bool = False
    messages: list[ChatMessage] = Field(default_factory=list)

    def find_index(self, message_id: str) -> int | None:
        """Position of a message in the thread, or None."""
        for index, message in enumerate(self.messages):
            if message.id == message_id:
                return index
        return None

    def get_message(self, message_id: str) -> ChatMessage | None:
        index = self.find_index(message_id)
        return None if index is None else self.messages[index]

    def conversation(self) -> list[ChatMessage]:
        """Messages without system notices."""
        return [m for m in self.messages if m.role != MessageRole.SYSTEM]

    def touch(self, when: datetime | None = None) -> None:
        """Advance last_activity; it never moves backwards."""
        when = as_utc(when) if when else utc_now()
        if when > self.last_activity:
            self.last_activity = when
