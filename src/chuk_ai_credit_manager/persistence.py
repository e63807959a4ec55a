# chuk_ai_credit_manager/persistence.py
"""
PersistenceAdapter - loads and saves the ledger and sessions through a
key/value store.

Loading is defensive: missing or corrupt data falls back to defaults,
messages get an id and timestamp when absent, and sessions without a
``lastActivity`` get one computed from their last message (or creation
time). External changes reported by the store are re-ingested through
the same normalization path.
"""

from __future__ import annotations

import json
import logging
import uuid
from collections.abc import Callable
from datetime import datetime
from typing import Any

from pydantic import TypeAdapter, ValidationError

from chuk_ai_credit_manager.config import Preferences
from chuk_ai_credit_manager.ledger import Ledger
from chuk_ai_credit_manager.models.chat_session import ChatSession, new_session_id
from chuk_ai_credit_manager.models.message import ChatMessage, MessageFlavor, new_message_id
from chuk_ai_credit_manager.models.timestamps import UtcDatetime, utc_now
from chuk_ai_credit_manager.models.transaction import LedgerState, Transaction, TransactionKind
from chuk_ai_credit_manager.session_store import SessionStore
from chuk_ai_credit_manager.storage.base import KeyValueStore

logger = logging.getLogger(__name__)

LEDGER_KEY = "credit_ledger"
SESSIONS_KEY = "chat_sessions"
ACTIVE_SESSION_KEY = "active_session"
DEFAULT_MODEL_KEY = "default_model"
PREFERENCES_KEY = "preferences"

ALL_KEYS = (LEDGER_KEY, SESSIONS_KEY, ACTIVE_SESSION_KEY, DEFAULT_MODEL_KEY, PREFERENCES_KEY)

LOADED_SESSION_TITLE = "Conversation"
RESTORED_BALANCE_DESCRIPTION = "Restored balance"

# Role names written by older clients
_LEGACY_ROLES = {"bot": "assistant", "ai": "assistant", "user": "user", "system": "system"}

_TIMESTAMP = TypeAdapter(UtcDatetime)


def _parse_timestamp(value: Any) -> datetime | None:
    """A UTC datetime, or None when the stored value is missing or unparseable."""
    if not value:
        return None
    try:
        return _TIMESTAMP.validate_python(value)
    except ValidationError:
        logger.warning(f"Ignoring unparseable stored timestamp {value!r}")
        return None


def _parse_json(raw: str | None, key: str) -> Any:
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except (TypeError, ValueError) as e:
        logger.warning(f"Failed to parse stored {key}: {e}")
        return None


def _as_list(value: Any) -> list:
    return value if isinstance(value, list) else []


def normalize_transaction(raw: Any) -> Transaction | None:
    if not isinstance(raw, dict):
        return None
    data = dict(raw)
    # Older clients stored the kind under "type".
    if "kind" not in data and "type" in data:
        data["kind"] = data.pop("type")
    data["timestamp"] = _parse_timestamp(data.get("timestamp")) or utc_now()
    if not data.get("id"):
        data["id"] = f"{data.get('kind', 'tx')}_{uuid.uuid4().hex[:12]}"
    try:
        return Transaction.model_validate(data)
    except ValidationError as e:
        logger.warning(f"Dropping invalid stored transaction: {e.error_count()} error(s)")
        return None


def normalize_ledger(raw: Any) -> LedgerState | None:
    """Coerce stored ledger data into a consistent LedgerState, or None if unusable."""
    if not isinstance(raw, dict):
        return None

    transactions = []
    for item in _as_list(raw.get("transactions")):
        tx = normalize_transaction(item)
        if tx is not None:
            transactions.append(tx)

    balance = raw.get("balance")
    if not isinstance(balance, int) or isinstance(balance, bool) or balance < 0:
        balance = None

    total = sum(tx.amount for tx in transactions)
    if transactions:
        if total < 0:
            logger.warning("Stored transactions sum to a negative balance; discarding ledger")
            return None
        if balance is not None and balance != total:
            logger.warning(f"Stored balance {balance} disagrees with transactions ({total}); using transactions")
        return LedgerState(balance=total, transactions=transactions)

    if balance is None:
        return None
    if balance > 0:
        # Keep the balance but back it with a transaction.
        restored = Transaction.new(TransactionKind.BONUS, balance, RESTORED_BALANCE_DESCRIPTION)
        return LedgerState(balance=balance, transactions=[restored])
    return LedgerState()


def normalize_message(raw: Any) -> ChatMessage | None:
    if not isinstance(raw, dict):
        return None
    data = dict(raw)
    if "role" not in data and "type" in data:
        data["role"] = _LEGACY_ROLES.get(str(data.pop("type")), "assistant")
    if "toneLabel" not in data and "tone" in data:
        data["toneLabel"] = data.pop("tone")
    if data.get("flavor") not in {f.value for f in MessageFlavor}:
        data["flavor"] = MessageFlavor.NONE.value
    data["id"] = data.get("id") or new_message_id()
    data["timestamp"] = _parse_timestamp(data.get("timestamp")) or utc_now()
    if "regeneratedAt" in data:
        data["regeneratedAt"] = _parse_timestamp(data["regeneratedAt"])
    data.setdefault("content", "")
    try:
        return ChatMessage.model_validate(data)
    except ValidationError as e:
        logger.warning(f"Dropping invalid stored message: {e.error_count()} error(s)")
        return None


def normalize_session(raw: Any) -> ChatSession | None:
    if not isinstance(raw, dict):
        return None

    messages = []
    for item in _as_list(raw.get("messages")):
        message = normalize_message(item)
        if message is not None:
            messages.append(message)

    created_at = _parse_timestamp(raw.get("createdAt") or raw.get("created_at"))
    last_activity = _parse_timestamp(raw.get("lastActivity") or raw.get("last_activity"))
    if last_activity is None:
        last_activity = messages[-1].timestamp if messages else (created_at or utc_now())

    data = {
        "id": raw.get("id") or new_session_id(),
        "title": raw.get("title") or LOADED_SESSION_TITLE,
        "createdAt": created_at or last_activity,
        "lastActivity": last_activity,
        "pinned": bool(raw.get("pinned")),
        "messages": messages,
    }
    try:
        return ChatSession.model_validate(data)
    except ValidationError as e:
        logger.warning(f"Dropping invalid stored session: {e.error_count()} error(s)")
        return None


class PersistenceAdapter:
    """Typed load/save of the workspace aggregates over a KeyValueStore."""

    def __init__(
        self,
        storage: KeyValueStore,
        initial_grant: int = 10,
        preferences: Preferences | None = None,
        user_name: str | None = None,
    ):
        self._storage = storage
        self._initial_grant = initial_grant
        self.preferences = preferences or Preferences()
        self._user_name = user_name
        self._ingesting = False
        self._detachers: list[Callable[[], None]] = []

    @property
    def storage(self) -> KeyValueStore:
        return self._storage

    # --- Ledger ---

    def load_ledger(self) -> Ledger:
        state = normalize_ledger(_parse_json(self._storage.get(LEDGER_KEY), LEDGER_KEY))
        if state is None:
            logger.info(f"No usable stored ledger; starting with {self._initial_grant} free credits")
            return Ledger.create(self._initial_grant)
        return Ledger(state)

    def save_ledger(self, ledger: Ledger) -> None:
        if self._ingesting:
            return
        self._storage.set(LEDGER_KEY, ledger.snapshot().model_dump_json(by_alias=True))

    # --- Sessions ---

    def load_sessions(self) -> list[ChatSession]:
        raw = _parse_json(self._storage.get(SESSIONS_KEY), SESSIONS_KEY)
        if not isinstance(raw, list):
            return []
        return [s for s in (normalize_session(item) for item in raw) if s is not None]

    def save_sessions(self, sessions: list[ChatSession]) -> None:
        if self._ingesting:
            return
        if not self.preferences.auto_save_chats:
            self._storage.remove(SESSIONS_KEY)
            return
        payload = [s.model_dump(mode="json", by_alias=True) for s in sessions]
        self._storage.set(SESSIONS_KEY, json.dumps(payload))

    def load_active_session_id(self) -> str | None:
        return self._storage.get(ACTIVE_SESSION_KEY)

    def save_active_session_id(self, session_id: str) -> None:
        if self._ingesting:
            return
        if self.preferences.auto_save_chats:
            self._storage.set(ACTIVE_SESSION_KEY, session_id)
        else:
            self._storage.remove(ACTIVE_SESSION_KEY)

    def load_session_store(self) -> SessionStore:
        return SessionStore(
            self.load_sessions(),
            active_id=self.load_active_session_id(),
            user_name=self._user_name,
        )

    def save_session_store(self, store: SessionStore) -> None:
        self.save_sessions(store.list())
        self.save_active_session_id(store.active_id)

    # --- Model and preferences ---

    def load_default_model(self) -> str | None:
        return self._storage.get(DEFAULT_MODEL_KEY)

    def save_default_model(self, model_key: str) -> None:
        if self.preferences.remember_model:
            self._storage.set(DEFAULT_MODEL_KEY, model_key)
        else:
            self._storage.remove(DEFAULT_MODEL_KEY)

    def load_preferences(self) -> Preferences:
        raw = _parse_json(self._storage.get(PREFERENCES_KEY), PREFERENCES_KEY)
        if isinstance(raw, dict):
            try:
                return Preferences.model_validate({**self.preferences.model_dump(), **raw})
            except ValidationError as e:
                logger.warning(f"Ignoring invalid stored preferences: {e.error_count()} error(s)")
        return self.preferences

    def save_preferences(self, preferences: Preferences) -> None:
        self.preferences = preferences
        self._storage.set(PREFERENCES_KEY, preferences.model_dump_json())

    def clear(self) -> None:
        """Remove every key this adapter owns."""
        for key in ALL_KEYS:
            self._storage.remove(key)

    # --- Wiring ---

    def attach(self, ledger: Ledger, store: SessionStore) -> None:
        """Save on every mutation and re-ingest external storage changes."""
        self.detach()
        self._detachers.append(ledger.subscribe(self.save_ledger))
        self._detachers.append(store.subscribe(self.save_session_store))
        self._detachers.append(
            self._storage.add_change_listener(lambda key, value: self.ingest_change(key, value, ledger, store))
        )

    def detach(self) -> None:
        for detach in self._detachers:
            detach()
        self._detachers.clear()

    def ingest_change(self, key: str, value: str | None, ledger: Ledger, store: SessionStore) -> None:
        """Apply a change made outside this process without writing it back."""
        self._ingesting = True
        try:
            if key == LEDGER_KEY:
                state = normalize_ledger(_parse_json(value, key))
                ledger.replace_state(state or Ledger.create(self._initial_grant).snapshot())
                logger.info("Re-ingested ledger after external change")
            elif key == SESSIONS_KEY:
                sessions = [s for s in (normalize_session(item) for item in _as_list(_parse_json(value, key))) if s]
                store.replace_all(sessions)
                logger.info(f"Re-ingested {len(sessions)} session(s) after external change")
            elif key == PREFERENCES_KEY:
                self.preferences = self.load_preferences()
        finally:
            self._ingesting = False

