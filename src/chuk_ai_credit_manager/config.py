# chuk_ai_credit_manager/config.py
"""Startup configuration: environment defaults plus typed config records."""

from __future__ import annotations

import logging
import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from chuk_ai_credit_manager.metering import DEFAULT_MODEL_PROFILES
from chuk_ai_credit_manager.models.model_profile import ModelProfile

load_dotenv()

logger = logging.getLogger(__name__)


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Ignoring non-integer {name}={raw!r}; using {default}")
        return default


# Central defaults: can be overridden by environment variables
DEFAULT_INITIAL_GRANT = _env_int("CHUK_CREDIT_INITIAL_GRANT", 10)
DEFAULT_MODEL = os.getenv("CHUK_CREDIT_DEFAULT_MODEL", "gpt-3.5-turbo")
DEFAULT_HISTORY_WINDOW = _env_int("CHUK_CREDIT_HISTORY_WINDOW", 10)


class Preferences(BaseModel):
    """Named feature toggles passed explicitly to the workspace."""

    auto_save_chats: bool = True
    remember_model: bool = True
    experimental_features: bool = False
    sound_effects: bool = True
    email_summaries: bool = False


class CoreConfig(BaseModel):
    """Everything the core needs at startup."""

    initial_grant: int = Field(default=DEFAULT_INITIAL_GRANT, ge=0)
    model_profiles: dict[str, ModelProfile] = Field(default_factory=dict)
    default_model: str = DEFAULT_MODEL
    history_window: int = Field(default=DEFAULT_HISTORY_WINDOW, ge=1)
    preferences: Preferences = Field(default_factory=Preferences)

    @classmethod
    def from_env(cls, **overrides) -> CoreConfig:
        """Build a config from the environment defaults and the reference price table."""
        values = {
            "initial_grant": DEFAULT_INITIAL_GRANT,
            "default_model": DEFAULT_MODEL,
            "history_window": DEFAULT_HISTORY_WINDOW,
            "model_profiles": dict(DEFAULT_MODEL_PROFILES),
        }
        values.update(overrides)
        return cls(**values)
