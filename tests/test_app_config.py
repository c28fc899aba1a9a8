"""Tests for mission_control.config (Settings and get_settings)."""

import pytest

from mission_control.config import Settings, get_settings


class TestDefaultSettings:
    def test_default_api_port(self):
        s = Settings(_env_file=None)
        assert s.api_port == 8787

    def test_default_environment_is_development(self):
        s = Settings(_env_file=None)
        assert s.environment == "development"

    def test_default_api_key(self):
        s = Settings(_env_file=None)
        assert s.api_key == "change-me"

    def test_default_database_url_is_sqlite(self):
        s = Settings(_env_file=None)
        assert "sqlite" in s.database_url

    def test_default_telemetry_tunables(self):
        s = Settings(_env_file=None)
        assert s.recency_window_seconds == 600
        assert s.default_context_tokens == 1_000_000
        assert s.context_alert_threshold == 80.0
        assert s.context_alert_policy == "every_cycle"
        assert s.offline_after_seconds == 0

    def test_default_roster(self):
        s = Settings(_env_file=None)
        assert s.agent_roster["agent:main:main"] == "noah"
        assert s.agent_order == ["noah", "kai", "dora"]


class TestEnvironmentOverrides:
    def test_roster_from_json_env(self, monkeypatch):
        monkeypatch.setenv("AGENT_ROSTER", '{"agent:ops:main": "ops"}')
        monkeypatch.setenv("AGENT_ORDER", '["ops"]')
        s = Settings(_env_file=None)
        assert s.agent_roster == {"agent:ops:main": "ops"}
        assert s.agent_order == ["ops"]

    def test_alert_policy_from_env(self, monkeypatch):
        monkeypatch.setenv("CONTEXT_ALERT_POLICY", "on_crossing")
        assert Settings(_env_file=None).context_alert_policy == "on_crossing"

    def test_unknown_alert_policy_rejected(self):
        with pytest.raises(ValueError):
            Settings(_env_file=None, context_alert_policy="sometimes")


class TestInsecureSecrets:
    def test_insecure_secrets_contains_change_me(self):
        assert "change-me" in Settings.INSECURE_SECRETS

    def test_insecure_secrets_contains_empty_string(self):
        assert "" in Settings.INSECURE_SECRETS


class TestValidateProduction:
    def test_production_with_insecure_key_raises_runtime_error(self):
        s = Settings(_env_file=None, environment="production", api_key="change-me")
        with pytest.raises(RuntimeError, match="API_KEY"):
            s.validate_production()

    def test_production_with_empty_key_raises_runtime_error(self):
        s = Settings(_env_file=None, environment="production", api_key="")
        with pytest.raises(RuntimeError):
            s.validate_production()

    def test_production_with_custom_key_passes(self):
        s = Settings(_env_file=None, environment="production", api_key="a" * 64)
        s.validate_production()

    def test_development_with_insecure_key_does_not_raise(self):
        s = Settings(_env_file=None, environment="development", api_key="change-me")
        s.validate_production()


class TestGetSettings:
    def test_get_settings_returns_settings_instance(self):
        get_settings.cache_clear()
        assert isinstance(get_settings(), Settings)

    def test_get_settings_cached_returns_same_object(self):
        get_settings.cache_clear()
        assert get_settings() is get_settings()

    def test_cache_clear_allows_reload(self):
        get_settings.cache_clear()
        s1 = get_settings()
        get_settings.cache_clear()
        s2 = get_settings()
        assert s1 is not s2
