# chuk_ai_credit_manager/models/action.py
"""Per-session action state machine and typed action results."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel

from chuk_ai_credit_manager.exceptions import ErrorCode


class ActionState(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    FULFILLED = "fulfilled"
    FAILED = "failed"


class ActionKind(str, Enum):
    """The four credit-consuming actions."""

    SEND = "send"
    REGENERATE = "regenerate"
    SUMMARIZE = "summarize"
    REWRITE = "rewrite"


class ActionResult(BaseModel):
    """
    Outcome of a coordinator action.

    ``error`` is set whenever ``state`` is FAILED. ``warning`` carries
    non-fatal problems such as a post-reply debit that could not be
    applied. ``discarded`` marks completions dropped because their
    session or target message vanished while the call was in flight.
    """

    action: ActionKind
    session_id: str
    state: ActionState
    error: ErrorCode | None = None
    message: str | None = None
    warning: str | None = None
    discarded: bool = False
    message_id: str | None = None
    transaction_id: str | None = None
    cost: int = 0

    @property
    def ok(self) -> bool:
        return self.state == ActionState.FULFILLED
