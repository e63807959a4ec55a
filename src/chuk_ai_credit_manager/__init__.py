# chuk_ai_credit_manager/__init__.py
"""
chuk_ai_credit_manager - credit-metered conversation session manager.

Components:
- Ledger: spendable balance plus an append-only transaction log
- MeteringPolicy: static per-model credit prices
- SessionStore: independent chat threads with pin and activity state
- ActionCoordinator: send / regenerate / summarize / rewrite, serialized per session
- PersistenceAdapter: defensive load/save over a key/value store
- Workspace: the aggregate that wires all of the above together

Usage:
    from chuk_ai_credit_manager import CoreConfig, Workspace
    from chuk_ai_credit_manager.providers import DemoCompletionProvider
    from chuk_ai_credit_manager.storage import InMemoryKeyValueStore

    ws = Workspace(CoreConfig.from_env(), DemoCompletionProvider(), InMemoryKeyValueStore())
    result = await ws.send(ws.active_session_id, "Hello!")
"""

from chuk_ai_credit_manager.config import CoreConfig, Preferences
from chuk_ai_credit_manager.coordinator import ActionCoordinator
from chuk_ai_credit_manager.exceptions import (
    Busy,
    CreditManagerError,
    ErrorCode,
    InsufficientCredits,
    LastSessionError,
    NotFound,
    ProviderError,
    ProviderTimeout,
)
from chuk_ai_credit_manager.ledger import Ledger
from chuk_ai_credit_manager.metering import DEFAULT_MODEL_PROFILES, MeteringPolicy
from chuk_ai_credit_manager.models import (
    ActionKind,
    ActionResult,
    ActionState,
    ChatMessage,
    ChatSession,
    MessageFlavor,
    MessageRole,
    ModelProfile,
    Transaction,
    TransactionKind,
)
from chuk_ai_credit_manager.persistence import PersistenceAdapter
from chuk_ai_credit_manager.prompts import TonePreset
from chuk_ai_credit_manager.session_store import SessionStore
from chuk_ai_credit_manager.workspace import Workspace

__version__ = "0.1.0"


def get_version() -> str:
    """Return the package version."""
    return __version__


__all__ = [
    "ActionCoordinator",
    "ActionKind",
    "ActionResult",
    "ActionState",
    "Busy",
    "ChatMessage",
    "ChatSession",
    "CoreConfig",
    "CreditManagerError",
    "DEFAULT_MODEL_PROFILES",
    "ErrorCode",
    "InsufficientCredits",
    "LastSessionError",
    "Ledger",
    "MessageFlavor",
    "MessageRole",
    "MeteringPolicy",
    "ModelProfile",
    "NotFound",
    "PersistenceAdapter",
    "Preferences",
    "ProviderError",
    "ProviderTimeout",
    "SessionStore",
    "TonePreset",
    "Transaction",
    "TransactionKind",
    "Workspace",
    "__version__",
    "get_version",
]
