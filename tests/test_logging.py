"""Tests for logging settings resolution."""

from __future__ import annotations

from ds_adoption.core.logging import LogSettings, resolve_settings


class TestResolveSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("DS_ADOPTION_LOG_LEVEL", raising=False)
        monkeypatch.delenv("DS_ADOPTION_LOG_FORMAT", raising=False)
        assert resolve_settings() == LogSettings(level="INFO", fmt="console")

    def test_verbose_default_level(self, monkeypatch):
        monkeypatch.delenv("DS_ADOPTION_LOG_LEVEL", raising=False)
        assert resolve_settings(verbose=True).level == "DEBUG"

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("DS_ADOPTION_LOG_LEVEL", "warning")
        monkeypatch.setenv("DS_ADOPTION_LOG_FORMAT", "JSON")
        assert resolve_settings(verbose=True) == LogSettings(level="WARNING", fmt="json")

    def test_unknown_values_fall_back(self, monkeypatch):
        monkeypatch.setenv("DS_ADOPTION_LOG_LEVEL", "chatty")
        monkeypatch.setenv("DS_ADOPTION_LOG_FORMAT", "xml")
        assert resolve_settings() == LogSettings(level="INFO", fmt="console")
