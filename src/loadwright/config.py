# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Session configuration with environment overrides.

Environment variables (read by ``SessionConfig.from_env``):
    LOADWRIGHT_BROWSER            chromium | firefox | webkit
    LOADWRIGHT_SCREENSHOT_DIR     directory for screenshot files
    LOADWRIGHT_SCREENSHOT_PREFIX  prefix for generated screenshot names
    LOADWRIGHT_SCREENSHOT_PERM    octal permission bits, e.g. 644
    LOADWRIGHT_LOG_LEVEL          root log level
    LOADWRIGHT_JSON_LOGS          1/true for JSON log lines
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

BROWSER_TYPES = ("chromium", "firefox", "webkit")

DEFAULT_BROWSER_TYPE = "chromium"
DEFAULT_SCREENSHOT_PREFIX = "Screenshot_"
DEFAULT_SCREENSHOT_PERM = 0o644
# Per-capture timestamp; microseconds keep names distinct within one second.
SCREENSHOT_TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S-%f"

_TRUTHY = ("1", "true", "yes", "on")


@dataclass
class SessionConfig:
    """Handle-level configuration."""

    browser_type: str = DEFAULT_BROWSER_TYPE
    screenshot_dir: Path = Path(".")
    screenshot_prefix: str = DEFAULT_SCREENSHOT_PREFIX
    screenshot_perm: int = DEFAULT_SCREENSHOT_PERM
    log_level: str = "INFO"
    json_logs: bool = False

    def __post_init__(self) -> None:
        if self.browser_type not in BROWSER_TYPES:
            raise ValueError(f"Unknown browser type {self.browser_type!r}, expected one of {', '.join(BROWSER_TYPES)}")
        self.screenshot_dir = Path(self.screenshot_dir)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> SessionConfig:
        env = os.environ if environ is None else environ
        perm = env.get("LOADWRIGHT_SCREENSHOT_PERM")
        return cls(
            browser_type=env.get("LOADWRIGHT_BROWSER", DEFAULT_BROWSER_TYPE).lower(),
            screenshot_dir=Path(env.get("LOADWRIGHT_SCREENSHOT_DIR", ".")),
            screenshot_prefix=env.get("LOADWRIGHT_SCREENSHOT_PREFIX", DEFAULT_SCREENSHOT_PREFIX),
            screenshot_perm=int(perm, 8) if perm else DEFAULT_SCREENSHOT_PERM,
            log_level=env.get("LOADWRIGHT_LOG_LEVEL", "INFO"),
            json_logs=env.get("LOADWRIGHT_JSON_LOGS", "").lower() in _TRUTHY,
        )
