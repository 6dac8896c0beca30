"""
Tests for providers/manager.py - lazy construction and caching.
"""
from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

import config
import providers.manager as manager_mod
from providers.manager import get_provider


@pytest.fixture(autouse=True)
def reset_provider():
    """Each test starts with a clean provider cache."""
    manager_mod._provider = None
    yield
    manager_mod._provider = None


class TestGetProvider:
    def test_missing_key_raises(self, monkeypatch):
        monkeypatch.setattr(config, "GOOGLE_API_KEY", None)
        with pytest.raises(RuntimeError, match="GOOGLE_API_KEY"):
            get_provider()

    def test_builds_gemini_with_configured_model(self, monkeypatch):
        monkeypatch.setattr(config, "GOOGLE_API_KEY", "test-key")
        monkeypatch.setattr(config, "GEMINI_MODEL", "gemini-test")
        with patch("providers.gemini_provider.genai.Client") as client_cls:
            provider = get_provider()
        client_cls.assert_called_once_with(api_key="test-key")
        assert provider.full_name == "google/gemini-test"

    def test_cached_after_first_build(self, monkeypatch):
        monkeypatch.setattr(config, "GOOGLE_API_KEY", "test-key")
        sentinel = MagicMock()
        with patch.object(manager_mod, "_build_provider", return_value=sentinel) as build:
            assert get_provider() is sentinel
            assert get_provider() is sentinel
        build.assert_called_once()
