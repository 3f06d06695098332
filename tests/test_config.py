"""Tests for environment-driven settings."""

import importlib

from assistant_gateway import config


def test_log_level_accepts_lowercase(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "info")
    try:
        importlib.reload(config)
        assert config.LOG_LEVEL == "INFO"
    finally:
        monkeypatch.undo()
        importlib.reload(config)
