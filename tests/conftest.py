# tests/conftest.py
"""
Shared pytest fixtures and configuration for chuk_ai_credit_manager tests.
"""

import asyncio
import logging

import pytest

from chuk_ai_credit_manager.config import CoreConfig
from chuk_ai_credit_manager.coordinator import ActionCoordinator
from chuk_ai_credit_manager.ledger import Ledger
from chuk_ai_credit_manager.metering import MeteringPolicy
from chuk_ai_credit_manager.models.model_profile import ModelProfile
from chuk_ai_credit_manager.session_store import SessionStore
from chuk_ai_credit_manager.storage.providers.memory import InMemoryKeyValueStore

# Configure logging for tests
logging.basicConfig(level=logging.WARNING)
logging.getLogger("chuk_ai_credit_manager").setLevel(logging.DEBUG)


class ScriptedProvider:
    """Completion provider that replays canned replies or raises a fixed error."""

    def __init__(self, replies=None, error=None):
        self.replies = list(replies or [])
        self.error = error
        self.calls = []

    async def complete(self, prompt, history, options):
        self.calls.append({"prompt": prompt, "history": list(history), "options": options})
        if self.error is not None:
            raise self.error
        if self.replies:
            return self.replies.pop(0)
        return f"reply to: {prompt}"


class GatedProvider(ScriptedProvider):
    """Blocks every call until ``release()`` so tests can interleave actions."""

    def __init__(self, replies=None, error=None):
        super().__init__(replies, error)
        self._gate = asyncio.Event()
        self.started = asyncio.Event()

    def release(self):
        self._gate.set()

    async def complete(self, prompt, history, options):
        self.started.set()
        await self._gate.wait()
        return await super().complete(prompt, history, options)


@pytest.fixture
def profiles():
    return {
        "cheap": ModelProfile(key="cheap", display_name="Cheap", credit_cost=1),
        "pricey": ModelProfile(key="pricey", display_name="Pricey", credit_cost=5),
    }


@pytest.fixture
def metering(profiles):
    return MeteringPolicy(profiles)


@pytest.fixture
def ledger():
    return Ledger.create(10)


@pytest.fixture
def store():
    return SessionStore()


@pytest.fixture
def provider():
    return ScriptedProvider()


@pytest.fixture
def provider_factory():
    """Access to the provider test doubles."""
    return {"scripted": ScriptedProvider, "gated": GatedProvider}


@pytest.fixture
def coordinator(ledger, store, provider, metering):
    return ActionCoordinator(ledger, store, provider, metering=metering, default_model="cheap")


@pytest.fixture
def kv_store():
    return InMemoryKeyValueStore()


@pytest.fixture
def core_config(profiles):
    return CoreConfig(initial_grant=10, model_profiles=profiles, default_model="cheap")
