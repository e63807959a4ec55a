# chuk_ai_credit_manager/models/message.py
from __future__ import annotations

import uuid
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from chuk_ai_credit_manager.models.timestamps import UtcDatetime, utc_now


class MessageRole(str, Enum):
    """Who authored a chat message."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class MessageFlavor(str, Enum):
    """How an assistant message was produced."""

    NONE = "none"
    SUMMARY = "summary"
    REWRITE = "rewrite"


def new_message_id() -> str:
    return f"msg-{uuid.uuid4().hex[:12]}"


class ChatMessage(BaseModel):
    """
    A single message in a chat thread.

    Frozen: regenerate/rewrite completions produce an updated copy via
    ``model_copy(update=...)`` and the session store swaps it in place.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: str = Field(default_factory=new_message_id)
    role: MessageRole
    content: str
    timestamp: UtcDatetime = Field(default_factory=utc_now)
    flavor: MessageFlavor = MessageFlavor.NONE
    tone_label: str | None = None
    regenerated_at: UtcDatetime | None = None

    @property
    def is_system(self) -> bool:
        return self.role == MessageRole.SYSTEM

    @classmethod
    def user(cls, content: str) -> ChatMessage:
        return cls(role=MessageRole.USER, content=content)

    @classmethod
    def assistant(cls, content: str, flavor: MessageFlavor = MessageFlavor.NONE, tone_label: str | None = None) -> ChatMessage:
        return cls(role=MessageRole.ASSISTANT, content=content, flavor=flavor, tone_label=tone_label)

    @classmethod
    def system(cls, content: str) -> ChatMessage:
        return cls(role=MessageRole.SYSTEM, content=content)
