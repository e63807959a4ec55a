# chuk_ai_credit_manager/storage/__init__.py
"""
Key/value persistence port and its providers.
"""

from chuk_ai_credit_manager.storage.base import ChangeListener, KeyValueStore
from chuk_ai_credit_manager.storage.providers.file import FileKeyValueStore
from chuk_ai_credit_manager.storage.providers.memory import InMemoryKeyValueStore

__all__ = [
    "ChangeListener",
    "FileKeyValueStore",
    "InMemoryKeyValueStore",
    "KeyValueStore",
]
