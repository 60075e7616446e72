"""Tests for settings parsing and logging setup."""

import logging
from pathlib import Path

from src.api import logging_config
from src.api.config import Settings
from src.api.paths import resolve_repo_path, repo_root


def test_cors_origins_from_comma_separated_env(monkeypatch):
    monkeypatch.setenv("CORS_ORIGINS", "http://a.test, http://b.test")
    settings = Settings(_env_file=None)
    assert settings.cors_origins == ["http://a.test", "http://b.test"]


def test_blank_llm_key_means_no_provider(monkeypatch):
    monkeypatch.setenv("LLM_API_KEY", "  ")
    monkeypatch.setenv("LLM_BASE_URL", "")
    settings = Settings(_env_file=None)
    assert settings.llm_api_key is None
    assert settings.llm_base_url is None
    assert settings.has_llm_provider is False

    monkeypatch.setenv("LLM_API_KEY", "sk-test")
    assert Settings(_env_file=None).has_llm_provider is True


def test_resolve_repo_path(tmp_path):
    assert resolve_repo_path(tmp_path) == tmp_path
    assert resolve_repo_path(Path("data/x.yaml")) == repo_root() / "data" / "x.yaml"


def test_setup_logging_writes_server_log(tmp_path, monkeypatch):
    monkeypatch.setattr(logging_config, "_initialized", False)
    root = logging.getLogger()
    previous_handlers = root.handlers[:]
    previous_level = root.level
    try:
        log_file = logging_config.setup_logging(tmp_path, "DEBUG")

        assert log_file == tmp_path / "server.log"
        assert "Server started at" in log_file.read_text(encoding="utf-8")
        assert logging.getLogger("httpx").level == logging.WARNING
        # Second call is a no-op.
        assert logging_config.setup_logging(tmp_path / "other") == tmp_path / "other" / "server.log"
        assert not (tmp_path / "other").exists()
    finally:
        for handler in root.handlers:
            if handler not in previous_handlers:
                handler.close()
        root.handlers = previous_handlers
        root.setLevel(previous_level)
