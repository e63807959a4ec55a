# chuk_ai_credit_manager/exceptions.py
"""
Error taxonomy for the credit manager.

All of these are recoverable. The ledger and session store raise them
directly; the action coordinator converts them into ``ActionResult``
values carrying the matching ``ErrorCode``.
"""

from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Stable identifiers for failures reported as typed results."""

    INSUFFICIENT_CREDITS = "insufficient_credits"
    PROVIDER_ERROR = "provider_error"
    PROVIDER_TIMEOUT = "provider_timeout"
    BUSY = "busy"
    NOT_FOUND = "not_found"
    LAST_SESSION = "last_session"
    INVALID_REQUEST = "invalid_request"


class CreditManagerError(Exception):
    """Base class for all credit manager errors."""

    code: ErrorCode = ErrorCode.INVALID_REQUEST


class InsufficientCredits(CreditManagerError):
    """The balance cannot cover the requested amount."""

    code = ErrorCode.INSUFFICIENT_CREDITS

    def __init__(self, required: int, available: int):
        self.required = required
        self.available = available
        plural = "" if required == 1 else "s"
        super().__init__(f"You need {required} credit{plural} but only {available} available")


class ProviderError(CreditManagerError):
    """The completion provider failed (network, HTTP or model error)."""

    code = ErrorCode.PROVIDER_ERROR


class ProviderTimeout(ProviderError):
    """The completion provider did not answer before its deadline."""

    code = ErrorCode.PROVIDER_TIMEOUT


class Busy(CreditManagerError):
    """A credit-consuming action is already pending for the session."""

    code = ErrorCode.BUSY

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"An action is already in progress for session {session_id}")


class NotFound(CreditManagerError):
    """A referenced session, message or catalog entry does not exist."""

    code = ErrorCode.NOT_FOUND

    def __init__(self, kind: str, ident: str | None = None, detail: str | None = None):
        self.kind = kind
        self.ident = ident
        if detail is None:
            detail = f"{kind} {ident} not found" if ident else f"{kind} not found"
        super().__init__(detail)


class LastSessionError(CreditManagerError):
    """Deleting the only remaining session is not allowed."""

    code = ErrorCode.LAST_SESSION

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__("Keep at least one conversation so you always have history to reference.")
