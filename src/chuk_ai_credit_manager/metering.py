# chuk_ai_credit_manager/metering.py
"""
Metering policy: static per-model credit prices.

Unknown model keys cost one credit.
"""

from __future__ import annotations

from collections.abc import Mapping

from chuk_ai_credit_manager.models.model_profile import ModelProfile

FALLBACK_COST = 1

DEFAULT_MODEL_PROFILES: dict[str, ModelProfile] = {
    "gpt-3.5-turbo": ModelProfile(
        key="gpt-3.5-turbo",
        display_name="GPT-3.5 Turbo",
        credit_cost=1,
        description="Fast and efficient - 1 credit per message",
    ),
    "gpt-4": ModelProfile(
        key="gpt-4",
        display_name="GPT-4",
        credit_cost=5,
        description="Most capable model - 5 credits per message",
    ),
    "gpt-4-turbo": ModelProfile(
        key="gpt-4-turbo",
        display_name="GPT-4 Turbo",
        credit_cost=3,
        description="Balanced performance - 3 credits per message",
    ),
}


class MeteringPolicy:
    """Read-only lookup of model prices."""

    def __init__(self, profiles: Mapping[str, ModelProfile] | None = None):
        self._profiles: dict[str, ModelProfile] = dict(DEFAULT_MODEL_PROFILES if profiles is None else profiles)

    @property
    def profiles(self) -> dict[str, ModelProfile]:
        return dict(self._profiles)

    def profile(self, model_key: str) -> ModelProfile | None:
        return self._profiles.get(model_key)

    def cost(self, model_key: str) -> int:
        """Credits charged per action for ``model_key``."""
        profile = self._profiles.get(model_key)
        return profile.credit_cost if profile else FALLBACK_COST

    def can_afford(self, balance: int, model_key: str) -> bool:
        return balance >= self.cost(model_key)

    def display_name(self, model_key: str) -> str:
        profile = self._profiles.get(model_key)
        return profile.display_name if profile else model_key

    def messages_remaining(self, balance: int, model_key: str) -> int:
        """How many actions the balance covers at this model's price."""
        return max(balance, 0) // self.cost(model_key)
