"""Unit tests for application configuration."""

from __future__ import annotations

import pytest

from deploy_triggers.config import Environment, ObservabilitySettings, Settings


class TestObservabilitySettings:
    def test_defaults(self) -> None:
        settings = ObservabilitySettings()
        assert settings.service_name == "deploy-triggers"
        assert settings.log_level == "INFO"
        assert settings.metrics_enabled is True
        assert settings.tracing_enabled is False

    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("TRACING_ENABLED", "true")
        settings = ObservabilitySettings()
        assert settings.log_level == "DEBUG"
        assert settings.tracing_enabled is True


class TestSettings:
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("ENVIRONMENT", raising=False)
        settings = Settings()
        assert settings.environment == Environment.DEVELOPMENT
        assert settings.debug is False
        assert settings.api_prefix == "/api/v1"
        assert settings.port == 8000

    def test_nested_settings(self) -> None:
        settings = Settings()
        assert isinstance(settings.observability, ObservabilitySettings)

    def test_environment_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ENVIRONMENT", "production")
        assert Settings().environment == Environment.PRODUCTION


class TestEnvironment:
    def test_values(self) -> None:
        assert Environment.DEVELOPMENT == "development"
        assert Environment.PRODUCTION == "production"
        assert Environment.TESTING == "testing"
        assert Environment.STAGING == "staging"
