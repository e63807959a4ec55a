# chuk_ai_credit_manager/storage/base.py
"""
Base key/value store.

Values are opaque text. Listeners are told about changes made *outside*
this store instance (another process, another open client sharing the
same backing data); a store never echoes its own writes back to itself.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable

logger = logging.getLogger(__name__)

# (key, new value or None when removed)
ChangeListener = Callable[[str, str | None], None]


class KeyValueStore(ABC):
    """Synchronous text store keyed by string."""

    def __init__(self) -> None:
        self._change_listeners: list[ChangeListener] = []

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the stored text or None when absent."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store text under ``key``."""

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete ``key``; missing keys are ignored."""

    @abstractmethod
    def keys(self) -> list[str]:
        """All stored keys."""

    def add_change_listener(self, listener: ChangeListener) -> Callable[[], None]:
        """Register for external-change notifications; returns an unsubscribe callable."""
        self._change_listeners.append(listener)

        def remove_listener() -> None:
            if listener in self._change_listeners:
                self._change_listeners.remove(listener)

        return remove_listener

    def disconnect(self) -> None:
        """Stop reporting external changes; stored values are untouched."""
        self._change_listeners.clear()

    def _emit_change(self, key: str, value: str | None) -> None:
        for listener in list(self._change_listeners):
            try:
                listener(key, value)
            except Exception as e:
                logger.warning(f"Storage change listener failed for {key}: {e}")
