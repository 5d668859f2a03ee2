"""Unit tests for application configuration.

Tests cover:
- List parsing
- YAML layering per environment
- Environment variable overrides
- Provider availability properties
"""

from __future__ import annotations

import pytest

from recipe_extraction.core.config import Settings, get_settings
from recipe_extraction.core.config.settings import LLMSettings, parse_list
from recipe_extraction.core.config.yaml_source import deep_merge


pytestmark = pytest.mark.unit


# =============================================================================
# Helpers
# =============================================================================


class TestParseList:
    """Tests for parse_list helper function."""

    def test_parses_comma_separated_string(self) -> None:
        """Should parse comma-separated string."""
        result = parse_list("http://localhost:3000 , http://localhost:8080 ")
        assert result == ["http://localhost:3000", "http://localhost:8080"]

    def test_filters_empty_values(self) -> None:
        """Should drop empty entries."""
        assert parse_list("a,,b") == ["a", "b"]
        assert parse_list("") == []

    def test_passes_through_list(self) -> None:
        """Should return list as-is."""
        origins = ["http://localhost:3000"]
        assert parse_list(origins) == origins


class TestDeepMerge:
    """Tests for YAML layer merging."""

    def test_merges_nested_dicts(self) -> None:
        """Should merge nested keys and replace leaves."""
        base = {"llm": {"openrouter": {"model": "a", "max_retries": 1}}, "x": [1]}
        override = {"llm": {"openrouter": {"max_retries": 0}}, "x": [2]}

        merged = deep_merge(base, override)

        assert merged == {
            "llm": {"openrouter": {"model": "a", "max_retries": 0}},
            "x": [2],
        }
        assert base["llm"]["openrouter"]["max_retries"] == 1


# =============================================================================
# Settings
# =============================================================================


class TestSettings:
    """Tests for Settings class."""

    def test_test_environment_overrides(self) -> None:
        """Should layer the test YAML over the base files."""
        settings = Settings()

        assert settings.APP_ENV == "test"
        assert settings.is_testing is True
        assert settings.is_non_production is True
        assert settings.logging.level == "DEBUG"
        assert settings.logging.format == "text"
        assert settings.observability.metrics.enabled is False
        assert settings.thumbnails.capture_enabled is False
        assert settings.llm.openrouter.max_retries == 0

    def test_base_values_survive_overrides(self) -> None:
        """Should keep base YAML values the environment does not touch."""
        settings = Settings()

        assert settings.api.v1_prefix == "/api/v1/recipe-extraction"
        assert settings.server.host == "0.0.0.0"
        assert settings.llm.openrouter.model == "google/gemini-2.5-pro-exp-03-25:free"
        assert (
            settings.llm.openrouter.fallback_model == "google/gemini-2.0-flash-exp:free"
        )
        assert settings.llm.gemini.model == "gemini-pro"
        assert settings.thumbnails.frame_timestamps == [15, 30, 45, 60, 90, 120, 180]

    def test_production_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should load the production layer."""
        monkeypatch.setenv("APP_ENV", "production")

        settings = Settings()

        assert settings.is_production is True
        assert settings.is_non_production is False

    def test_nested_environment_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should let nested environment variables beat YAML."""
        monkeypatch.setenv("THUMBNAILS__UPLOADS_ROOT", "/data/uploads")

        settings = Settings()

        assert settings.thumbnails.uploads_root == "/data/uploads"

    def test_init_values_win(self) -> None:
        """Should prefer values passed to the constructor."""
        settings = Settings(llm=LLMSettings(enabled=False))

        assert settings.llm.enabled is False


class TestProviderAvailability:
    """Tests for has_openrouter / has_gemini."""

    def test_no_keys(self) -> None:
        """Should report no providers without keys."""
        settings = Settings()

        assert settings.has_openrouter is False
        assert settings.has_gemini is False

    def test_keys_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should enable providers whose key is set."""
        monkeypatch.setenv("OPENROUTER_API_KEY", "sk-or-test")
        monkeypatch.setenv("GOOGLE_API_KEY", "AIza-test")

        settings = Settings()

        assert settings.has_openrouter is True
        assert settings.has_gemini is True

    def test_disabled_llm_hides_keys(self) -> None:
        """Should report no providers when the LLM layer is disabled."""
        settings = Settings(
            OPENROUTER_API_KEY="sk-or-test", llm=LLMSettings(enabled=False)
        )

        assert settings.has_openrouter is False


class TestGetSettings:
    """Tests for the cached accessor."""

    def test_returns_cached_instance(self) -> None:
        """Should return the same object until the cache is cleared."""
        first = get_settings()

        assert get_settings() is first
        get_settings.cache_clear()
        assert get_settings() is not first
