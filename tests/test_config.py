"""Tests for SessionConfig defaults and environment overrides."""

from pathlib import Path

import pytest

from loadwright.config import (
    BROWSER_TYPES,
    DEFAULT_SCREENSHOT_PERM,
    DEFAULT_SCREENSHOT_PREFIX,
    SessionConfig,
)


class TestSessionConfig:
    def test_defaults(self):
        cfg = SessionConfig()
        assert cfg.browser_type == "chromium"
        assert cfg.screenshot_dir == Path(".")
        assert cfg.screenshot_prefix == DEFAULT_SCREENSHOT_PREFIX == "Screenshot_"
        assert cfg.screenshot_perm == DEFAULT_SCREENSHOT_PERM == 0o644
        assert cfg.json_logs is False

    def test_unknown_browser_rejected(self):
        with pytest.raises(ValueError, match="Unknown browser type"):
            SessionConfig(browser_type="netscape")

    def test_screenshot_dir_coerced_to_path(self):
        assert SessionConfig(screenshot_dir="shots").screenshot_dir == Path("shots")

    def test_browser_types(self):
        assert set(BROWSER_TYPES) == {"chromium", "firefox", "webkit"}


class TestFromEnv:
    def test_empty_env_gives_defaults(self):
        assert SessionConfig.from_env({}) == SessionConfig()

    def test_overrides(self):
        cfg = SessionConfig.from_env(
            {
                "LOADWRIGHT_BROWSER": "Firefox",
                "LOADWRIGHT_SCREENSHOT_DIR": "/tmp/shots",
                "LOADWRIGHT_SCREENSHOT_PREFIX": "vu1_",
                "LOADWRIGHT_SCREENSHOT_PERM": "600",
                "LOADWRIGHT_LOG_LEVEL": "DEBUG",
                "LOADWRIGHT_JSON_LOGS": "true",
            }
        )
        assert cfg.browser_type == "firefox"
        assert cfg.screenshot_dir == Path("/tmp/shots")
        assert cfg.screenshot_prefix == "vu1_"
        assert cfg.screenshot_perm == 0o600
        assert cfg.log_level == "DEBUG"
        assert cfg.json_logs is True

    def test_reads_process_environment(self, monkeypatch):
        monkeypatch.setenv("LOADWRIGHT_BROWSER", "webkit")
        assert SessionConfig.from_env().browser_type == "webkit"
