# chuk_ai_credit_manager/models/__init__.py
"""
Core models for the credit manager.
"""

from chuk_ai_credit_manager.models.action import ActionKind, ActionResult, ActionState
from chuk_ai_credit_manager.models.chat_session import ChatSession
from chuk_ai_credit_manager.models.credit_package import CreditPackage
from chuk_ai_credit_manager.models.message import ChatMessage, MessageFlavor, MessageRole
from chuk_ai_credit_manager.models.model_profile import ModelProfile
from chuk_ai_credit_manager.models.transaction import (
    LedgerState,
    LedgerTotals,
    Transaction,
    TransactionKind,
    TransactionStatus,
)

__all__ = [
    "ActionKind",
    "ActionResult",
    "ActionState",
    "ChatMessage",
    "ChatSession",
    "CreditPackage",
    "LedgerState",
    "LedgerTotals",
    "MessageFlavor",
    "MessageRole",
    "ModelProfile",
    "Transaction",
    "TransactionKind",
    "TransactionStatus",
]
