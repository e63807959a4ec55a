# chuk_ai_credit_manager/providers/deadline.py
"""Deadline policy wrapper for any completion provider."""

from __future__ import annotations

import asyncio
import logging

from chuk_ai_credit_manager.exceptions import ProviderTimeout
from chuk_ai_credit_manager.providers.base import CompletionOptions, CompletionProvider, HistoryEntry

logger = logging.getLogger(__name__)


class DeadlineCompletionProvider:
    """Bounds each call to ``timeout`` seconds, surfacing overruns as ProviderTimeout."""

    def __init__(self, inner: CompletionProvider, timeout: float = 30.0):
        if timeout <= 0:
            raise ValueError("timeout must be positive")
        self._inner = inner
        self._timeout = timeout

    @property
    def timeout(self) -> float:
        return self._timeout

    async def complete(
        self,
        prompt: str,
        history: list[HistoryEntry],
        options: CompletionOptions,
    ) -> str:
        try:
            return await asyncio.wait_for(
                self._inner.complete(prompt, history, options),
                timeout=self._timeout,
            )
        except TimeoutError as e:
            logger.warning(f"Completion for {options.model} exceeded {self._timeout}s")
            raise ProviderTimeout(f"Model {options.model} did not answer within {self._timeout}s") from e
