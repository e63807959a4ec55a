"""Tests for configuration records and environment loading."""

import pytest
from pydantic import ValidationError

from chuk_ai_credit_manager import config as config_module
from chuk_ai_credit_manager.config import CoreConfig, Preferences
from chuk_ai_credit_manager.metering import DEFAULT_MODEL_PROFILES


class TestPreferences:
    def test_defaults(self):
        prefs = Preferences()
        assert prefs.auto_save_chats is True
        assert prefs.remember_model is True
        assert prefs.experimental_features is False


class TestCoreConfig:
    def test_defaults_are_valid(self):
        config = CoreConfig()
        assert config.initial_grant >= 0
        assert config.history_window >= 1
        assert config.model_profiles == {}

    def test_rejects_negative_grant(self):
        with pytest.raises(ValidationError):
            CoreConfig(initial_grant=-1)

    def test_rejects_zero_history_window(self):
        with pytest.raises(ValidationError):
            CoreConfig(history_window=0)


class TestEnvironmentDefaults:
    def test_env_int_reads_variable(self, monkeypatch):
        monkeypatch.setenv("CHUK_CREDIT_INITIAL_GRANT", "25")
        assert config_module._env_int("CHUK_CREDIT_INITIAL_GRANT", 10) == 25

    def test_env_int_missing_uses_default(self, monkeypatch):
        monkeypatch.delenv("CHUK_CREDIT_HISTORY_WINDOW", raising=False)
        assert config_module._env_int("CHUK_CREDIT_HISTORY_WINDOW", 10) == 10

    def test_env_int_garbage_uses_default(self, monkeypatch):
        monkeypatch.setenv("CHUK_CREDIT_INITIAL_GRANT", "lots")
        assert config_module._env_int("CHUK_CREDIT_INITIAL_GRANT", 10) == 10


class TestFromEnv:
    def test_uses_module_defaults(self, monkeypatch):
        monkeypatch.setattr(config_module, "DEFAULT_INITIAL_GRANT", 25)
        monkeypatch.setattr(config_module, "DEFAULT_MODEL", "gpt-4")
        monkeypatch.setattr(config_module, "DEFAULT_HISTORY_WINDOW", 4)
        config = CoreConfig.from_env()
        assert config.initial_grant == 25
        assert config.default_model == "gpt-4"
        assert config.history_window == 4

    def test_does_not_reread_environment(self, monkeypatch):
        monkeypatch.setenv("CHUK_CREDIT_INITIAL_GRANT", "999")
        assert CoreConfig.from_env().initial_grant == config_module.DEFAULT_INITIAL_GRANT

    def test_uses_reference_price_table(self):
        config = CoreConfig.from_env()
        assert set(config.model_profiles) == set(DEFAULT_MODEL_PROFILES)
        assert config.model_profiles["gpt-4"].credit_cost == 5

    def test_overrides_win(self):
        config = CoreConfig.from_env(initial_grant=3, preferences=Preferences(remember_model=False))
        assert config.initial_grant == 3
        assert config.preferences.remember_model is False
