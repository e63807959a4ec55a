# chuk_ai_credit_manager/ledger.py
"""
Ledger - spendable credit balance plus an append-only transaction log.

Every balance change is backed by exactly one transaction. ``credit`` and
``debit`` contain no suspension points: reading the balance, checking it,
writing the new balance and appending the transaction happen as one step,
so actions resolving back to back on the event loop can never both spend
the same credits.
"""

from __future__ import annotations

import logging

from chuk_ai_credit_manager.exceptions import InsufficientCredits
from chuk_ai_credit_manager.models.transaction import (
    LedgerState,
    LedgerTotals,
    Transaction,
    TransactionKind,
)
from chuk_ai_credit_manager.observable import Observable

logger = logging.getLogger(__name__)

WELCOME_BONUS_DESCRIPTION = "Welcome bonus - Free credits!"


class Ledger(Observable):
    """Balance and transaction history for one user."""

    def __init__(self, state: LedgerState | None = None):
        super().__init__()
        self._state = state or LedgerState()

    @classmethod
    def create(cls, initial_grant: int) -> Ledger:
        """A fresh ledger holding ``initial_grant`` via a synthetic bonus transaction."""
        ledger = cls()
        if initial_grant > 0:
            ledger._apply(Transaction.new(TransactionKind.BONUS, initial_grant, WELCOME_BONUS_DESCRIPTION))
        return ledger

    @property
    def balance(self) -> int:
        return self._state.balance

    @property
    def transactions(self) -> list[Transaction]:
        """All transactions in creation order."""
        return list(self._state.transactions)

    def snapshot(self) -> LedgerState:
        """Copy of the persisted shape."""
        return self._state.model_copy(deep=True)

    def credit(
        self,
        amount: int,
        description: str = "Credits purchased",
        kind: TransactionKind = TransactionKind.PURCHASE,
    ) -> Transaction:
        """Add credits. Always succeeds for a positive amount."""
        if amount <= 0:
            raise ValueError(f"credit amount must be positive, got {amount}")
        if kind == TransactionKind.USAGE:
            raise ValueError("credit cannot record a usage transaction")

        transaction = self._apply(Transaction.new(kind, amount, description))
        logger.debug(f"Credited {amount} ({description}); balance={self.balance}")
        return transaction

    def debit(self, amount: int, description: str = "AI Chat Message") -> Transaction:
        """Spend credits, or raise InsufficientCredits leaving the ledger untouched."""
        if amount <= 0:
            raise ValueError(f"debit amount must be positive, got {amount}")
        if self._state.balance < amount:
            raise InsufficientCredits(required=amount, available=self._state.balance)

        transaction = self._apply(Transaction.new(TransactionKind.USAGE, -amount, description))
        logger.debug(f"Debited {amount} ({description}); balance={self.balance}")
        return transaction

    def history(self, limit: int | None = None, offset: int = 0) -> list[Transaction]:
        """Transactions most-recent-first, paged by ``offset``/``limit``."""
        newest_first = list(reversed(self._state.transactions))
        if limit is None:
            return newest_first[offset:]
        return newest_first[offset : offset + limit]

    def totals(self) -> LedgerTotals:
        purchased = spent = bonuses = 0
        for tx in self._state.transactions:
            if tx.kind == TransactionKind.PURCHASE:
                purchased += tx.amount
            elif tx.kind == TransactionKind.USAGE:
                spent += abs(tx.amount)
            elif tx.kind == TransactionKind.BONUS:
                bonuses += tx.amount
        return LedgerTotals(purchased=purchased, spent=spent, bonuses=bonuses)

    def replace_state(self, state: LedgerState, notify: bool = True) -> None:
        """Swap in a whole new state (reset or external re-ingest)."""
        self._state = state
        if notify:
            self._notify()

    def _apply(self, transaction: Transaction) -> Transaction:
        # No await between the check above and this write.
        self._state.balance += transaction.amount
        self._state.transactions.append(transaction)
        self._notify()
        return transaction
