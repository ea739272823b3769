"""Unit tests for application settings."""

from __future__ import annotations

import pytest

from recipe_extraction.core.config import Provider, Settings, get_settings


pytestmark = pytest.mark.unit


class TestSettingsLoading:
    """Tests for YAML and environment layering."""

    def test_base_yaml_values(self, settings: Settings) -> None:
        """Should load values from the base YAML files."""
        assert settings.app.name == "Recipe Extraction Service"
        assert settings.api.v1_prefix == "/api/v1/recipe-extraction"
        assert settings.llm.default_provider == Provider.GEMINI
        assert settings.llm.gemini.model == "gemini-2.5-flash"
        assert settings.acquisition.reader_url == "https://r.jina.ai/"
        assert settings.extraction.max_window_chars == 40000
        assert settings.extraction.lead_in_chars == 2000

    def test_test_environment_overrides(self, settings: Settings) -> None:
        """Should apply the test environment overrides."""
        assert settings.APP_ENV == "test"
        assert settings.is_testing is True
        assert settings.logging.level == "WARNING"
        assert settings.observability.metrics.enabled is False
        assert settings.observability.telemetry.enabled is False

    def test_nested_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should let nested environment variables override YAML."""
        monkeypatch.setenv("LLM__DEFAULT_PROVIDER", "openai")
        monkeypatch.setenv("EXTRACTION__MAX_WINDOW_CHARS", "1000")

        settings = Settings()

        assert settings.llm.default_provider == Provider.OPENAI
        assert settings.extraction.max_window_chars == 1000
        assert settings.llm.gemini.model == "gemini-2.5-flash"

    def test_bot_markers_default(self, settings: Settings) -> None:
        """Should keep the default challenge markers when YAML omits them."""
        assert "just a moment" in settings.acquisition.bot_challenge_markers
        assert "challenge-platform" in settings.acquisition.bot_challenge_markers


class TestGetSettings:
    """Tests for the cached accessor."""

    def test_cached(self) -> None:
        """Should return the same instance until the cache is cleared."""
        first = get_settings()

        assert get_settings() is first
        get_settings.cache_clear()
        assert get_settings() is not first
