# chuk_ai_credit_manager/models/transaction.py
"""Ledger records: transactions, persisted ledger state and totals."""

from __future__ import annotations

import uuid
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from chuk_ai_credit_manager.models.timestamps import UtcDatetime, utc_now


class TransactionKind(str, Enum):
    """Why the balance changed."""

    BONUS = "bonus"
    PURCHASE = "purchase"
    USAGE = "usage"


class TransactionStatus(str, Enum):
    COMPLETED = "completed"


class Transaction(BaseModel):
    """One signed, immutable balance change."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: str
    kind: TransactionKind
    amount: int
    description: str = ""
    timestamp: UtcDatetime = Field(default_factory=utc_now)
    status: TransactionStatus = TransactionStatus.COMPLETED

    @classmethod
    def new(cls, kind: TransactionKind, amount: int, description: str) -> Transaction:
        """Create a transaction with a fresh id and the current time."""
        return cls(
            id=f"{kind.value}_{uuid.uuid4().hex[:12]}",
            kind=kind,
            amount=amount,
            description=description,
        )


class LedgerState(BaseModel):
    """Persisted ledger shape: ``{balance, transactions[]}``."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    balance: int = Field(default=0, ge=0)
    transactions: list[Transaction] = Field(default_factory=list)


class LedgerTotals(BaseModel):
    """Aggregates over the transaction log."""

    purchased: int = 0
    spent: int = 0
    bonuses: int = 0
