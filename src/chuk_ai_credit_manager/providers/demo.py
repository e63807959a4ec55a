# chuk_ai_credit_manager/providers/demo.py
"""
Demo completion provider.

Stands in for a real model when no API credentials are configured:
returns canned, intent-aware text so the rest of the system can be
exercised end to end.
"""

from __future__ import annotations

import asyncio
import random

from chuk_ai_credit_manager.providers.base import CompletionIntent, CompletionOptions, HistoryEntry

DEMO_RESPONSES = (
    "Thanks for your message! I'm currently running in demo mode. "
    "Configure a model provider to enable full AI capabilities.",
    "I'd love to help you with that! This is a demo response since no model provider is configured yet.",
    "Great question! I'm operating in demo mode right now. Configure a model provider for real answers.",
    "I appreciate your input! Currently showing demo responses.",
    "Interesting! I'm in demonstration mode at the moment.",
)

DEMO_SUMMARY = (
    "Demo summary: The conversation covered key goals, highlighted blockers, and ended with next steps to action."
)
DEMO_REWRITE = "Demo rewrite: Adjust the tone of this response once real AI access is enabled."
DEMO_REGENERATE = "Demo regenerate: Configure a model provider to receive an updated answer here."


class DemoCompletionProvider:
    """Canned responses with optional simulated latency."""

    def __init__(self, latency: float = 0.0, seed: int | None = None):
        self._latency = latency
        self._random = random.Random(seed)
        self.calls: list[tuple[str, CompletionOptions]] = []

    async def complete(
        self,
        prompt: str,
        history: list[HistoryEntry],
        options: CompletionOptions,
    ) -> str:
        self.calls.append((prompt, options))
        if self._latency:
            await asyncio.sleep(self._latency)
        return self.respond(prompt, options.intent)

    def respond(self, prompt: str, intent: CompletionIntent = CompletionIntent.REPLY) -> str:
        lower = prompt.lower()

        if intent == CompletionIntent.SUMMARY or "summary" in lower:
            return DEMO_SUMMARY
        if intent == CompletionIntent.REWRITE:
            return DEMO_REWRITE
        if intent == CompletionIntent.REGENERATE:
            return DEMO_REGENERATE

        if "help" in lower or "how" in lower:
            return "I'd be happy to help! Currently running in demo mode."
        if "what" in lower or "explain" in lower:
            return "That's a great question! I'm currently in demo mode, so detailed explanations are unavailable."
        if "hello" in lower or "hi" in lower.split():
            return "Hello! I'm currently running in demo mode."

        return self._random.choice(DEMO_RESPONSES)
