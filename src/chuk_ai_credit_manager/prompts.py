# chuk_ai_credit_manager/prompts.py
"""
Prompt text used by the action coordinator.

Kept in one place so the wording can be tuned without touching the
coordinator's control flow.
"""

from __future__ import annotations

from enum import Enum

from chuk_ai_credit_manager.exceptions import ProviderTimeout
from chuk_ai_credit_manager.models.message import ChatMessage, MessageRole


class TonePreset(str, Enum):
    """Fixed rewrite tones, each with a label and a canned instruction."""

    CONCISE = "concise"
    WARMER = "warmer"
    EXECUTIVE = "executive"

    @property
    def label(self) -> str:
        return _TONE_LABELS[self]

    @property
    def instruction(self) -> str:
        return _TONE_INSTRUCTIONS[self]

    @property
    def description(self) -> str:
        return _TONE_DESCRIPTIONS[self]


_TONE_LABELS = {
    TonePreset.CONCISE: "Concise",
    TonePreset.WARMER: "Warmer",
    TonePreset.EXECUTIVE: "Executive",
}

_TONE_DESCRIPTIONS = {
    TonePreset.CONCISE: "Trim to essentials",
    TonePreset.WARMER: "Soften tone",
    TonePreset.EXECUTIVE: "C-suite recap",
}

_TONE_INSTRUCTIONS = {
    TonePreset.CONCISE: (
        "Rewrite the assistant response so it is approximately 30% shorter while preserving all key facts. "
        "Use crisp bullet points where it improves clarity."
    ),
    TonePreset.WARMER: (
        "Rewrite the assistant response in a warm, encouraging, and supportive tone "
        "while keeping all original information intact."
    ),
    TonePreset.EXECUTIVE: (
        "Rewrite the assistant response as a brief executive summary with numbered next steps "
        "and clear ownership for each action."
    ),
}

SUMMARY_INSTRUCTION = (
    "Summarise the following conversation into key decisions, blockers, and next steps. "
    "Provide bullet points with short, actionable statements and keep it under 180 words."
)

PROVIDER_FAILURE_NOTICE = (
    "We couldn't reach the model. Try again in a few moments or switch models if the issue persists."
)
PROVIDER_TIMEOUT_NOTICE = "The model took too long to answer. Try again in a few moments or switch models."
DEBIT_FAILURE_WARNING = "Response ready, but credit deduction failed. Please review your balance."


def build_transcript(messages: list[ChatMessage]) -> str:
    """``Speaker: content`` lines for every non-system message."""
    lines = []
    for message in messages:
        if message.role == MessageRole.SYSTEM:
            continue
        speaker = "User" if message.role == MessageRole.USER else "Assistant"
        lines.append(f"{speaker}: {message.content}")
    return "\n".join(lines)


def build_summary_prompt(messages: list[ChatMessage]) -> str:
    return f"{SUMMARY_INSTRUCTION}\n\n{build_transcript(messages)}"


def build_rewrite_prompt(tone: TonePreset, content: str) -> str:
    return f"{tone.instruction}\n\nAssistant response:\n{content}"


def failure_notice(error: Exception) -> str:
    """Text of the system message appended when the provider fails."""
    if isinstance(error, ProviderTimeout):
        return PROVIDER_TIMEOUT_NOTICE
    return PROVIDER_FAILURE_NOTICE
