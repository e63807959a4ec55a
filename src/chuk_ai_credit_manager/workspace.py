# chuk_ai_credit_manager/workspace.py
"""
Workspace - the single owning aggregate for one signed-in user.

Constructed once at startup from a ``CoreConfig``, a completion provider
and a key/value store; torn down with ``close()`` on logout and rebuilt
from scratch with ``reset()``. Everything a UI or CLI needs to read is
exposed here as a snapshot.

Example:
    ```python
    ws = Workspace(CoreConfig.from_env(), DemoCompletionProvider(), InMemoryKeyValueStore())
    result = await ws.send(ws.active_session_id, "Plan a product launch")
    print(ws.balance, result.state)
    ```
"""

from __future__ import annotations

import logging
from typing import Any

from chuk_ai_credit_manager.config import CoreConfig, Preferences
from chuk_ai_credit_manager.coordinator import ActionCoordinator
from chuk_ai_credit_manager.ledger import Ledger
from chuk_ai_credit_manager.metering import MeteringPolicy
from chuk_ai_credit_manager.models.action import ActionResult, ActionState
from chuk_ai_credit_manager.models.chat_session import ChatSession
from chuk_ai_credit_manager.models.credit_package import CreditPackage
from chuk_ai_credit_manager.models.message import ChatMessage
from chuk_ai_credit_manager.models.transaction import LedgerTotals, Transaction
from chuk_ai_credit_manager.packages import CREDIT_PACKAGES, get_package
from chuk_ai_credit_manager.persistence import PersistenceAdapter
from chuk_ai_credit_manager.prompts import TonePreset
from chuk_ai_credit_manager.providers.base import CompletionProvider
from chuk_ai_credit_manager.storage.base import KeyValueStore

logger = logging.getLogger(__name__)


class Workspace:
    """Ledger, sessions and the action coordinator, wired to persistence."""

    def __init__(
        self,
        config: CoreConfig,
        provider: CompletionProvider,
        storage: KeyValueStore,
        user_name: str | None = None,
    ):
        self.config = config
        self.metering = MeteringPolicy(config.model_profiles or None)
        self.persistence = PersistenceAdapter(
            storage,
            initial_grant=config.initial_grant,
            preferences=config.preferences,
            user_name=user_name,
        )
        self.persistence.preferences = self.persistence.load_preferences()

        self.ledger = self.persistence.load_ledger()
        self.sessions = self.persistence.load_session_store()

        default_model = config.default_model
        if self.preferences.remember_model:
            default_model = self.persistence.load_default_model() or default_model

        self.coordinator = ActionCoordinator(
            self.ledger,
            self.sessions,
            provider,
            metering=self.metering,
            default_model=default_model,
            history_window=config.history_window,
        )

        self.persistence.attach(self.ledger, self.sessions)
        self.persistence.save_ledger(self.ledger)
        self.persistence.save_session_store(self.sessions)
        self._closed = False
        logger.info(f"Workspace ready: balance={self.balance}, sessions={len(self.sessions)}")

    def __enter__(self) -> Workspace:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # --- Read-only queries ---

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def preferences(self) -> Preferences:
        return self.persistence.preferences

    @property
    def rewrite_enabled(self) -> bool:
        return self.preferences.experimental_features

    @property
    def balance(self) -> int:
        return self.ledger.balance

    @property
    def default_model(self) -> str:
        return self.coordinator.default_model

    @default_model.setter
    def default_model(self, model_key: str) -> None:
        self.coordinator.default_model = model_key
        self.persistence.save_default_model(model_key)

    @property
    def active_session_id(self) -> str:
        return self.sessions.active_id

    def history(self, limit: int | None = None, offset: int = 0) -> list[Transaction]:
        return self.ledger.history(limit=limit, offset=offset)

    def totals(self) -> LedgerTotals:
        return self.ledger.totals()

    def list_sessions(self) -> list[ChatSession]:
        return [s.model_copy(deep=True) for s in self.sessions.list()]

    def active_messages(self) -> list[ChatMessage]:
        return list(self.sessions.active.messages)

    def action_state(self, session_id: str | None = None) -> ActionState:
        return self.coordinator.state(session_id or self.active_session_id)

    def message_cost(self, model: str | None = None) -> int:
        return self.metering.cost(model or self.default_model)

    def messages_remaining(self, model: str | None = None) -> int:
        return self.metering.messages_remaining(self.balance, model or self.default_model)

    def credit_packages(self) -> list[CreditPackage]:
        return list(CREDIT_PACKAGES)

    # --- Commands ---

    async def send(self, session_id: str, content: str, model: str | None = None) -> ActionResult:
        return await self.coordinator.send(session_id, content, model=model)

    async def regenerate(self, session_id: str, message_id: str, model: str | None = None) -> ActionResult:
        return await self.coordinator.regenerate(session_id, message_id, model=model)

    async def summarize(self, session_id: str, model: str | None = None) -> ActionResult:
        return await self.coordinator.summarize(session_id, model=model)

    async def rewrite(
        self, session_id: str, message_id: str, tone: TonePreset | str, model: str | None = None
    ) -> ActionResult:
        return await self.coordinator.rewrite(session_id, message_id, tone, model=model)

    def delete_session(self, session_id: str) -> None:
        self.sessions.delete(session_id)
        self.coordinator.forget(session_id)

    def purchase_credits(self, package_id: str) -> Transaction:
        """Credit the ledger with a catalog package."""
        package = get_package(package_id)
        transaction = self.ledger.credit(
            package.credits,
            f"Purchased {package.name} - {package.credits} credits",
        )
        logger.info(f"Purchased package {package.id}; balance={self.balance}")
        return transaction

    def update_preferences(self, **changes: Any) -> Preferences:
        preferences = Preferences.model_validate({**self.preferences.model_dump(), **changes})
        self.persistence.save_preferences(preferences)
        # Re-apply storage policy for the new toggles.
        self.persistence.save_session_store(self.sessions)
        self.persistence.save_default_model(self.default_model)
        return preferences

    def reset(self) -> None:
        """Wipe stored state and start over with a fresh grant and welcome session."""
        self.persistence.clear()
        self.persistence.preferences = self.config.preferences
        for session_id in list(self.coordinator.states()):
            self.coordinator.forget(session_id)
        self.ledger.replace_state(Ledger.create(self.config.initial_grant).snapshot())
        self.sessions.replace_all([])
        self.persistence.save_session_store(self.sessions)
        logger.info("Workspace reset")

    def close(self) -> None:
        """Stop persisting and listening for external changes."""
        if self._closed:
            return
        self.persistence.detach()
        self.persistence.storage.disconnect()
        self._closed = True
        logger.info("Workspace closed")
