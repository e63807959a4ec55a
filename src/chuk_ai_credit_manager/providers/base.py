# chuk_ai_credit_manager/providers/base.py
from __future__ import annotations

from enum import Enum
from typing import Literal, Protocol, runtime_checkable

from pydantic import BaseModel, Field


class CompletionIntent(str, Enum):
    """Why the coordinator is asking for text."""

    REPLY = "reply"
    SUMMARY = "summary"
    REGENERATE = "regenerate"
    REWRITE = "rewrite"


class HistoryEntry(BaseModel):
    """One prior turn handed to the provider."""

    role: Literal["user", "assistant"]
    content: str

    model_config = {"frozen": True}


class CompletionOptions(BaseModel):
    model: str
    temperature: float | None = Field(default=None, ge=0.0, le=2.0)
    intent: CompletionIntent = CompletionIntent.REPLY

    model_config = {"frozen": True}


@runtime_checkable
class CompletionProvider(Protocol):
    """
    Text generation collaborator.

    Implementations raise ``ProviderError`` (or ``ProviderTimeout``) on
    failure; any other exception is treated as a bug and propagates.
    """

    async def complete(
        self,
        prompt: str,
        history: list[HistoryEntry],
        options: CompletionOptions,
    ) -> str: ...
