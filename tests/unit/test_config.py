"""Unit tests for configuration."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from multi_llm_orchestrator.config import EngineSettings


def test_settings_defaults(settings: EngineSettings) -> None:
    assert settings.log_format == "json"
    assert settings.default_tenant == "default"
    assert settings.correlation_header == "X-Correlation-Id"
    assert settings.parsed_cors_origins() == ["http://localhost:5173"]


def test_settings_from_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("ORCHESTRATOR_LOG_FORMAT", "text")
    monkeypatch.setenv("ORCHESTRATOR_DEFAULT_TENANT", " acme ")
    monkeypatch.setenv("ORCHESTRATOR_CORS_ORIGINS", "http://a.test, ,http://b.test")

    settings = EngineSettings(_env_file=tmp_path / "missing.env")

    assert settings.log_level == "DEBUG"
    assert settings.log_format == "text"
    assert settings.default_tenant == "acme"
    assert settings.parsed_cors_origins() == ["http://a.test", "http://b.test"]


def test_settings_from_env_file(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv("ORCHESTRATOR_DEFAULT_TENANT", raising=False)
    env_file = tmp_path / ".env"
    env_file.write_text("ORCHESTRATOR_DEFAULT_TENANT=from-file\n", encoding="utf-8")

    assert EngineSettings(_env_file=env_file).default_tenant == "from-file"


def test_blank_tenant_is_rejected(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("ORCHESTRATOR_DEFAULT_TENANT", "   ")
    with pytest.raises(ValidationError):
        EngineSettings(_env_file=tmp_path / "missing.env")


def test_unknown_log_format_is_rejected(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("ORCHESTRATOR_LOG_FORMAT", "xml")
    with pytest.raises(ValidationError):
        EngineSettings(_env_file=tmp_path / "missing.env")
