# tests/test_ledger.py
"""Tests for the Ledger: balance, transaction log and atomic debits."""

import random

import pytest

from chuk_ai_credit_manager.exceptions import InsufficientCredits
from chuk_ai_credit_manager.ledger import WELCOME_BONUS_DESCRIPTION, Ledger
from chuk_ai_credit_manager.models.transaction import LedgerState, TransactionKind, TransactionStatus


class TestLedgerCreate:
    def test_initial_grant_recorded_as_bonus(self):
        ledger = Ledger.create(10)
        assert ledger.balance == 10
        assert len(ledger.transactions) == 1
        bonus = ledger.transactions[0]
        assert bonus.kind == TransactionKind.BONUS
        assert bonus.amount == 10
        assert bonus.description == WELCOME_BONUS_DESCRIPTION
        assert bonus.status == TransactionStatus.COMPLETED

    def test_zero_grant_has_no_transactions(self):
        ledger = Ledger.create(0)
        assert ledger.balance == 0
        assert ledger.transactions == []


class TestCredit:
    def test_credit_increases_balance(self, ledger):
        tx = ledger.credit(25, "Top up")
        assert ledger.balance == 35
        assert tx.kind == TransactionKind.PURCHASE
        assert tx.amount == 25
        assert ledger.transactions[-1] == tx

    def test_credit_bonus_kind(self, ledger):
        tx = ledger.credit(5, "Referral", kind=TransactionKind.BONUS)
        assert tx.kind == TransactionKind.BONUS

    @pytest.mark.parametrize("amount", [0, -3])
    def test_credit_rejects_non_positive(self, ledger, amount):
        with pytest.raises(ValueError):
            ledger.credit(amount)
        assert ledger.balance == 10

    def test_credit_rejects_usage_kind(self, ledger):
        with pytest.raises(ValueError):
            ledger.credit(5, kind=TransactionKind.USAGE)


class TestDebit:
    def test_debit_records_negative_usage(self, ledger):
        tx = ledger.debit(4, "AI Assistant - Cheap")
        assert ledger.balance == 6
        assert tx.kind == TransactionKind.USAGE
        assert tx.amount == -4
        assert tx.description == "AI Assistant - Cheap"

    def test_debit_exact_balance(self, ledger):
        ledger.debit(10)
        assert ledger.balance == 0

    def test_overdraft_rejected_without_mutation(self, ledger):
        before = len(ledger.transactions)
        with pytest.raises(InsufficientCredits) as exc_info:
            ledger.debit(11)
        assert exc_info.value.required == 11
        assert exc_info.value.available == 10
        assert ledger.balance == 10
        assert len(ledger.transactions) == before

    def test_debit_rejects_non_positive(self, ledger):
        with pytest.raises(ValueError):
            ledger.debit(0)

    def test_transactions_are_immutable(self, ledger):
        tx = ledger.debit(1)
        with pytest.raises(Exception):
            tx.amount = 100


class TestInvariants:
    def test_random_sequences_keep_balance_consistent(self):
        rng = random.Random(1234)
        for _ in range(50):
            ledger = Ledger.create(10)
            applied = 10
            for _ in range(40):
                amount = rng.randint(1, 8)
                if rng.random() < 0.4:
                    ledger.credit(amount)
                    applied += amount
                else:
                    try:
                        ledger.debit(amount)
                        applied -= amount
                    except InsufficientCredits:
                        pass
                assert ledger.balance >= 0
            assert ledger.balance == applied
            assert ledger.balance == sum(tx.amount for tx in ledger.transactions)


class TestHistory:
    def test_most_recent_first(self, ledger):
        ledger.debit(1, "first")
        ledger.debit(1, "second")
        history = ledger.history()
        assert [tx.description for tx in history[:2]] == ["second", "first"]
        assert history[-1].kind == TransactionKind.BONUS

    def test_limit_and_offset(self, ledger):
        for i in range(5):
            ledger.debit(1, f"use {i}")
        assert [tx.description for tx in ledger.history(limit=2)] == ["use 4", "use 3"]
        assert [tx.description for tx in ledger.history(limit=2, offset=2)] == ["use 2", "use 1"]
        assert len(ledger.history(limit=100)) == 6

    def test_history_is_a_copy(self, ledger):
        ledger.history().clear()
        assert len(ledger.transactions) == 1


class TestTotals:
    def test_totals(self, ledger):
        ledger.credit(100, "Starter")
        ledger.debit(3)
        ledger.debit(2)
        totals = ledger.totals()
        assert totals.purchased == 100
        assert totals.spent == 5
        assert totals.bonuses == 10


class TestNotifications:
    def test_mutations_notify_subscribers(self, ledger):
        seen = []
        ledger.subscribe(lambda l: seen.append(l.balance))
        ledger.credit(5)
        ledger.debit(3)
        assert seen == [15, 12]

    def test_failed_debit_does_not_notify(self, ledger):
        seen = []
        ledger.subscribe(lambda l: seen.append(l.balance))
        with pytest.raises(InsufficientCredits):
            ledger.debit(50)
        assert seen == []

    def test_replace_state(self, ledger):
        seen = []
        ledger.subscribe(lambda l: seen.append(l.balance))
        ledger.replace_state(LedgerState(balance=0))
        assert ledger.balance == 0
        assert ledger.transactions == []
        assert seen == [0]

    def test_snapshot_is_detached(self, ledger):
        snap = ledger.snapshot()
        ledger.debit(5)
        assert snap.balance == 10
        assert len(snap.transactions) == 1
