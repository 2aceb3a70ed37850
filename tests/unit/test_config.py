"""Unit tests for environment-driven settings."""

from __future__ import annotations

import pytest

from nextclass.config import get_settings


@pytest.fixture(autouse=True)
def _fresh_settings():
  get_settings.cache_clear()
  yield
  get_settings.cache_clear()


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
  monkeypatch.setenv("NEXTCLASS_ALLOWED_ORIGINS", "http://localhost:3000, https://app.example.org")
  settings = get_settings()
  assert settings.allowed_origins == ("http://localhost:3000", "https://app.example.org")
  assert settings.task_service_provider == "local-http"
  assert settings.latex_max_passes == 5
  assert settings.mermaid_min_chars == 20


def test_wildcard_origin_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
  monkeypatch.setenv("NEXTCLASS_ALLOWED_ORIGINS", "*")
  with pytest.raises(ValueError, match="wildcard"):
    get_settings()


@pytest.mark.parametrize("timeout", ["30", "121"])
def test_completion_timeout_is_bounded(monkeypatch: pytest.MonkeyPatch, timeout: str) -> None:
  monkeypatch.setenv("NEXTCLASS_COMPLETION_TIMEOUT_SECONDS", timeout)
  with pytest.raises(ValueError, match="COMPLETION_TIMEOUT"):
    get_settings()


def test_latex_passes_are_capped(monkeypatch: pytest.MonkeyPatch) -> None:
  monkeypatch.setenv("NEXTCLASS_LATEX_MAX_PASSES", "6")
  with pytest.raises(ValueError, match="LATEX_MAX_PASSES"):
    get_settings()


def test_unknown_task_provider_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
  monkeypatch.setenv("NEXTCLASS_TASK_SERVICE_PROVIDER", "sqs")
  with pytest.raises(ValueError, match="TASK_SERVICE_PROVIDER"):
    get_settings()
