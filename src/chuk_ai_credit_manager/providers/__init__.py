# chuk_ai_credit_manager/providers/__init__.py
"""
Completion provider collaborators.

The core only depends on ``CompletionProvider.complete``; whether real or
simulated text comes back is the provider's business.
"""

from chuk_ai_credit_manager.providers.base import (
    CompletionIntent,
    CompletionOptions,
    CompletionProvider,
    HistoryEntry,
)
from chuk_ai_credit_manager.providers.deadline import DeadlineCompletionProvider
from chuk_ai_credit_manager.providers.demo import DemoCompletionProvider

__all__ = [
    "CompletionIntent",
    "CompletionOptions",
    "CompletionProvider",
    "DeadlineCompletionProvider",
    "DemoCompletionProvider",
    "HistoryEntry",
]
