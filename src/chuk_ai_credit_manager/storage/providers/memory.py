# chuk_ai_credit_manager/storage/providers/memory.py
"""
In-memory key/value store.

``connect()`` returns another client over the same data, which is how
two open clients of one browser profile behave: a write through one
client is reported to the other client's change listeners.
"""

from __future__ import annotations

from collections.abc import Callable

from chuk_ai_credit_manager.storage.base import ChangeListener, KeyValueStore


class _SharedData:
    def __init__(self) -> None:
        self.values: dict[str, str] = {}
        self.clients: list[InMemoryKeyValueStore] = []


class InMemoryKeyValueStore(KeyValueStore):
    """Dictionary-backed store; the default for tests and demos."""

    def __init__(self, initial: dict[str, str] | None = None, _shared: _SharedData | None = None):
        super().__init__()
        self._shared = _shared or _SharedData()
        self._shared.clients.append(self)
        if initial:
            self._shared.values.update(initial)

    def connect(self) -> InMemoryKeyValueStore:
        """Another client sharing this store's data."""
        return InMemoryKeyValueStore(_shared=self._shared)

    def add_change_listener(self, listener: ChangeListener) -> Callable[[], None]:
        if self not in self._shared.clients:
            self._shared.clients.append(self)
        return super().add_change_listener(listener)

    def disconnect(self) -> None:
        """Leave the shared client list until a listener is registered again."""
        super().disconnect()
        if self in self._shared.clients:
            self._shared.clients.remove(self)

    def get(self, key: str) -> str | None:
        return self._shared.values.get(key)

    def set(self, key: str, value: str) -> None:
        self._shared.values[key] = value
        self._broadcast(key, value)

    def remove(self, key: str) -> None:
        if key in self._shared.values:
            del self._shared.values[key]
            self._broadcast(key, None)

    def keys(self) -> list[str]:
        return list(self._shared.values)

    def _broadcast(self, key: str, value: str | None) -> None:
        for client in list(self._shared.clients):
            if client is not self:
                client._emit_change(key, value)
