"""Tests for environment based settings."""

import os
import pytest

from domain.value_objects.backend_mode import BackendMode
from shared.config.settings import ClaudeCodeConfig, Settings


ENV_KEYS = [
    "CLAUDE_PATH", "CLAUDE_WORKING_DIR", "CLAUDE_BACKEND", "CLAUDE_TIMEOUT",
    "LOG_LEVEL", "LOG_DIR", "DEBUG",
]


@pytest.fixture
def clean_env(monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


class TestClaudeCodeConfig:
    """Tests for ClaudeCodeConfig.from_env"""

    def test_defaults(self, clean_env):
        config = ClaudeCodeConfig.from_env()
        assert config.claude_path == "claude"
        assert config.working_dir == os.getcwd()
        assert config.backend == BackendMode.CLI
        assert config.timeout_seconds == 600

    def test_from_env(self, clean_env):
        clean_env.setenv("CLAUDE_PATH", "/usr/local/bin/claude")
        clean_env.setenv("CLAUDE_WORKING_DIR", "/srv/repo")
        clean_env.setenv("CLAUDE_BACKEND", "SDK")
        clean_env.setenv("CLAUDE_TIMEOUT", "30")

        config = ClaudeCodeConfig.from_env()
        assert config.claude_path == "/usr/local/bin/claude"
        assert config.working_dir == "/srv/repo"
        assert config.backend == BackendMode.SDK
        assert config.timeout_seconds == 30

    def test_invalid_backend(self, clean_env):
        clean_env.setenv("CLAUDE_BACKEND", "grpc")
        with pytest.raises(ValueError, match="CLAUDE_BACKEND"):
            ClaudeCodeConfig.from_env()


class TestSettings:
    """Tests for Settings.from_env"""

    def test_defaults(self, clean_env):
        settings = Settings.from_env()
        assert settings.log_level == "INFO"
        assert settings.log_dir is None
        assert settings.debug is False

    def test_from_env(self, clean_env):
        clean_env.setenv("LOG_LEVEL", "DEBUG")
        clean_env.setenv("LOG_DIR", "/var/log/tool")
        clean_env.setenv("DEBUG", "true")
        settings = Settings.from_env()
        assert settings.log_level == "DEBUG"
        assert settings.log_dir == "/var/log/tool"
        assert settings.debug is True
