# chuk_ai_credit_manager/observable.py
"""Minimal subscribe/notify contract shared by the ledger and session store."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

Listener = Callable[[Any], None]


class Observable:
    """
    Holds change listeners and notifies them after every mutation.

    Listeners receive the observable itself. A failing listener is logged
    and does not stop the remaining listeners or undo the mutation.
    """

    def __init__(self) -> None:
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception as e:
                logger.warning(f"Change listener {listener!r} failed: {e}")
