# chuk_ai_credit_manager/coordinator.py
"""
ActionCoordinator - the four credit-consuming chat actions.

Each action follows the same shape:

1. Reject immediately with BUSY if the session already has a pending action.
2. Resolve the model price and pre-check affordability (advisory only).
3. Mark the session PENDING and await the completion provider.
4. Drop the result silently if the session or target message vanished.
5. Apply the reply to the session, then debit the ledger. A debit that
   fails at this point keeps the delivered reply and reports a warning.

Provider failures become a visible ``system`` message in the session and
are never debited. Nothing here raises the credit manager's own errors:
callers always get an ``ActionResult``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime

from chuk_ai_credit_manager.exceptions import (
    Busy,
    CreditManagerError,
    ErrorCode,
    InsufficientCredits,
    NotFound,
    ProviderError,
)
from chuk_ai_credit_manager.ledger import Ledger
from chuk_ai_credit_manager.metering import MeteringPolicy
from chuk_ai_credit_manager.models.action import ActionKind, ActionResult, ActionState
from chuk_ai_credit_manager.models.message import ChatMessage, MessageFlavor, MessageRole
from chuk_ai_credit_manager.prompts import (
    DEBIT_FAILURE_WARNING,
    TonePreset,
    build_rewrite_prompt,
    build_summary_prompt,
    failure_notice,
)
from chuk_ai_credit_manager.providers.base import (
    CompletionIntent,
    CompletionOptions,
    CompletionProvider,
    HistoryEntry,
)
from chuk_ai_credit_manager.session_store import SessionStore

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_WINDOW = 10
SUMMARY_TEMPERATURE = 0.3
REWRITE_TEMPERATURE = 0.6


class ActionCoordinator:
    """Runs send/regenerate/summarize/rewrite against one ledger and session store."""

    def __init__(
        self,
        ledger: Ledger,
        sessions: SessionStore,
        provider: CompletionProvider,
        metering: MeteringPolicy | None = None,
        default_model: str = "gpt-3.5-turbo",
        history_window: int = DEFAULT_HISTORY_WINDOW,
    ):
        self._ledger = ledger
        self._sessions = sessions
        self._provider = provider
        self._metering = metering or MeteringPolicy()
        self.default_model = default_model
        self._history_window = history_window
        self._states: dict[str, ActionState] = {}

    # --- State queries ---

    def state(self, session_id: str) -> ActionState:
        return self._states.get(session_id, ActionState.IDLE)

    def states(self) -> dict[str, ActionState]:
        return dict(self._states)

    def is_pending(self, session_id: str) -> bool:
        return self.state(session_id) == ActionState.PENDING

    def forget(self, session_id: str) -> None:
        """Drop the recorded state for a session unless an action is in flight."""
        if not self.is_pending(session_id):
            self._states.pop(session_id, None)

    # --- Actions ---

    async def send(self, session_id: str, content: str, model: str | None = None) -> ActionResult:
        """Append a user message and the model's reply."""
        action = ActionKind.SEND
        if self.is_pending(session_id):
            return self._busy(action, session_id)

        text = (content or "").strip()
        if not text:
            return self._fail(action, session_id, ErrorCode.INVALID_REQUEST, "Message content cannot be empty")

        try:
            session = self._sessions.get(session_id)
            model_key, cost = self._price(model)
        except CreditManagerError as e:
            return self._fail(action, session_id, e.code, str(e))

        history = self._history(session.messages)
        self._states[session_id] = ActionState.PENDING
        try:
            # Optimistic: the user message stays even if the provider fails.
            self._sessions.append_message(session_id, ChatMessage.user(text))

            def apply(reply: str) -> ChatMessage:
                return self._sessions.append_message(session_id, ChatMessage.assistant(reply))

            return await self._complete_and_commit(
                action,
                session_id,
                model_key,
                cost,
                prompt=text,
                history=history,
                options=CompletionOptions(model=model_key, intent=CompletionIntent.REPLY),
                description=f"AI Assistant - {self._metering.display_name(model_key)}",
                apply=apply,
            )
        finally:
            self._settle(session_id)

    async def regenerate(self, session_id: str, message_id: str, model: str | None = None) -> ActionResult:
        """Replace a message's content in place with a fresh reply to the prompt before it."""
        action = ActionKind.REGENERATE
        if self.is_pending(session_id):
            return self._busy(action, session_id)

        try:
            session = self._sessions.get(session_id)
            target = self._sessions.get_message(session_id, message_id)
            if target.role != MessageRole.ASSISTANT or target.flavor != MessageFlavor.NONE:
                return self._fail(
                    action, session_id, ErrorCode.INVALID_REQUEST, "Only plain assistant replies can be regenerated"
                )
            prompt_message = self._sessions.last_user_message_before(session_id, message_id)
            model_key, cost = self._price(model)
        except CreditManagerError as e:
            return self._fail(action, session_id, e.code, str(e))

        prompt_index = session.find_index(prompt_message.id) or 0
        history = self._history(session.messages[:prompt_index])
        self._states[session_id] = ActionState.PENDING

        def apply(reply: str) -> ChatMessage:
            current = self._sessions.get_message(session_id, message_id)
            updated = current.model_copy(update={"content": reply, "regenerated_at": datetime.now(UTC)})
            return self._sessions.replace_message(session_id, updated)

        try:
            return await self._complete_and_commit(
                action,
                session_id,
                model_key,
                cost,
                prompt=prompt_message.content,
                history=history,
                options=CompletionOptions(model=model_key, intent=CompletionIntent.REGENERATE),
                description=f"AI Assistant Regenerate - {self._metering.display_name(model_key)}",
                apply=apply,
                target_message_id=message_id,
            )
        finally:
            self._settle(session_id)

    async def summarize(self, session_id: str, model: str | None = None) -> ActionResult:
        """Append a summary of the whole conversation."""
        action = ActionKind.SUMMARIZE
        if self.is_pending(session_id):
            return self._busy(action, session_id)

        try:
            session = self._sessions.get(session_id)
            if not session.conversation():
                raise NotFound("conversation", session_id, detail="Nothing to summarize yet")
            model_key, cost = self._price(model)
        except CreditManagerError as e:
            return self._fail(action, session_id, e.code, str(e))

        prompt = build_summary_prompt(session.messages)
        self._states[session_id] = ActionState.PENDING

        def apply(reply: str) -> ChatMessage:
            return self._sessions.append_message(
                session_id, ChatMessage.assistant(reply, flavor=MessageFlavor.SUMMARY)
            )

        try:
            return await self._complete_and_commit(
                action,
                session_id,
                model_key,
                cost,
                prompt=prompt,
                history=[],
                options=CompletionOptions(
                    model=model_key, temperature=SUMMARY_TEMPERATURE, intent=CompletionIntent.SUMMARY
                ),
                description=f"AI Assistant Summary - {self._metering.display_name(model_key)}",
                apply=apply,
            )
        finally:
            self._settle(session_id)

    async def rewrite(
        self,
        session_id: str,
        message_id: str,
        tone: TonePreset | str,
        model: str | None = None,
    ) -> ActionResult:
        """Append a tone-adjusted sibling of a message; the original is left alone."""
        action = ActionKind.REWRITE
        if self.is_pending(session_id):
            return self._busy(action, session_id)

        try:
            preset = TonePreset(tone)
        except ValueError:
            return self._fail(action, session_id, ErrorCode.INVALID_REQUEST, f"Unknown tone preset: {tone}")

        try:
            original = self._sessions.get_message(session_id, message_id)
            model_key, cost = self._price(model)
        except CreditManagerError as e:
            return self._fail(action, session_id, e.code, str(e))

        self._states[session_id] = ActionState.PENDING

        def apply(reply: str) -> ChatMessage:
            return self._sessions.append_message(
                session_id,
                ChatMessage.assistant(reply, flavor=MessageFlavor.REWRITE, tone_label=preset.label),
            )

        try:
            return await self._complete_and_commit(
                action,
                session_id,
                model_key,
                cost,
                prompt=build_rewrite_prompt(preset, original.content),
                history=[],
                options=CompletionOptions(
                    model=model_key, temperature=REWRITE_TEMPERATURE, intent=CompletionIntent.REWRITE
                ),
                description=f"AI Assistant Rewrite ({preset.label}) - {self._metering.display_name(model_key)}",
                apply=apply,
                target_message_id=message_id,
            )
        finally:
            self._settle(session_id)

    # --- Internals ---

    async def _complete_and_commit(
        self,
        action: ActionKind,
        session_id: str,
        model_key: str,
        cost: int,
        prompt: str,
        history: list[HistoryEntry],
        options: CompletionOptions,
        description: str,
        apply: Callable[[str], ChatMessage],
        target_message_id: str | None = None,
    ) -> ActionResult:
        try:
            reply = await self._provider.complete(prompt, history, options)
        except ProviderError as e:
            if self._target_gone(session_id, target_message_id):
                return self._discard(action, session_id)
            logger.warning(f"{action.value} failed for session {session_id} on {model_key}: {e}")
            notice = self._sessions.append_message(session_id, ChatMessage.system(failure_notice(e)))
            result = self._fail(action, session_id, e.code, str(e) or failure_notice(e))
            result.message_id = notice.id
            return result

        if self._target_gone(session_id, target_message_id):
            return self._discard(action, session_id)

        message = apply(reply)

        warning = None
        transaction_id = None
        try:
            transaction_id = self._ledger.debit(cost, description).id
        except InsufficientCredits as e:
            # The reply has been delivered; keep it and report the shortfall.
            logger.warning(f"Unable to deduct credits for {action.value} in session {session_id}: {e}")
            warning = DEBIT_FAILURE_WARNING

        self._states[session_id] = ActionState.FULFILLED
        logger.debug(f"{action.value} fulfilled for session {session_id} (cost={cost})")
        return ActionResult(
            action=action,
            session_id=session_id,
            state=ActionState.FULFILLED,
            warning=warning,
            message_id=message.id,
            transaction_id=transaction_id,
            cost=cost if transaction_id else 0,
        )

    def _price(self, model: str | None) -> tuple[str, int]:
        model_key = model or self.default_model
        cost = self._metering.cost(model_key)
        if not self._metering.can_afford(self._ledger.balance, model_key):
            raise InsufficientCredits(required=cost, available=self._ledger.balance)
        return model_key, cost

    def _history(self, messages: list[ChatMessage]) -> list[HistoryEntry]:
        conversation = [m for m in messages if m.role != MessageRole.SYSTEM]
        return [
            HistoryEntry(role="user" if m.role == MessageRole.USER else "assistant", content=m.content)
            for m in conversation[-self._history_window :]
        ]

    def _target_gone(self, session_id: str, message_id: str | None) -> bool:
        session = self._sessions.find(session_id)
        if session is None:
            return True
        return message_id is not None and session.get_message(message_id) is None

    def _settle(self, session_id: str) -> None:
        # An unexpected provider exception must not leave the session stuck.
        if self._states.get(session_id) == ActionState.PENDING:
            self._states[session_id] = ActionState.FAILED

    def _busy(self, action: ActionKind, session_id: str) -> ActionResult:
        # The in-flight action keeps its PENDING state.
        error = Busy(session_id)
        return ActionResult(
            action=action,
            session_id=session_id,
            state=ActionState.FAILED,
            error=error.code,
            message=str(error),
        )

    def _fail(self, action: ActionKind, session_id: str, code: ErrorCode, message: str) -> ActionResult:
        if session_id in self._sessions:
            self._states[session_id] = ActionState.FAILED
        return ActionResult(
            action=action,
            session_id=session_id,
            state=ActionState.FAILED,
            error=code,
            message=message,
        )

    def _discard(self, action: ActionKind, session_id: str) -> ActionResult:
        logger.debug(f"Dropping {action.value} result: target in session {session_id} no longer exists")
        if session_id in self._sessions:
            self._states[session_id] = ActionState.IDLE
        else:
            self._states.pop(session_id, None)
        return ActionResult(action=action, session_id=session_id, state=ActionState.IDLE, discarded=True)
