"""Tests for application and engine settings."""

import pytest
from pydantic import ValidationError

from py_ncg.config import DEFAULT_ENGINE_SETTINGS, EngineSettings, Settings


class TestSettings:
    """Test environment driven settings."""

    def test_defaults(self):
        settings = Settings()
        assert settings.default_canvas_width == 800.0
        assert settings.default_canvas_height == 600.0

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("NCG_API_PORT", "9001")
        monkeypatch.setenv("NCG_RANDOM_SEED", "fixed")
        settings = Settings()
        assert settings.api_port == 9001
        assert settings.random_seed == "fixed"

    def test_cors_origins(self, monkeypatch):
        monkeypatch.setenv("NCG_ALLOWED_ORIGINS", "http://a.test, http://b.test,")
        assert Settings().cors_origins == ["http://a.test", "http://b.test"]


class TestEngineSettings:
    """Test engine tunables."""

    def test_defaults(self):
        assert DEFAULT_ENGINE_SETTINGS.trial_distances == [60, 40, 80, 100, 120, 140, 160, 180, 200]
        assert DEFAULT_ENGINE_SETTINGS.min_vertex_distance == 44
        assert DEFAULT_ENGINE_SETTINGS.bounds_margin == 30
        assert DEFAULT_ENGINE_SETTINGS.max_random_segment_length == 5

    def test_validation(self):
        with pytest.raises(ValidationError):
            EngineSettings(max_random_segment_length=1)
