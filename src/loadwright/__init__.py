# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""loadwright: Playwright browser automation for load-test scripts.

One ``Automation`` handle per virtual user binds a single browser (or
persistent context) and one active page:
- session: fresh launch, persistent launch, or CDP attach, and teardown
- actions: navigation, waits, element queries and interaction, screenshots
- metrics: first paint, first contentful paint, first input timings
"""

from __future__ import annotations

from .bridge import MODULE_NAME, Automation
from .config import SessionConfig
from .errors import ActionError, LoadwrightError, SessionError
from .reporter import ErrorReporter, report_error
from .session import BrowserSession, OwnedBrowser, OwnedContext

__all__ = [
    "MODULE_NAME",
    "ActionError",
    "Automation",
    "BrowserSession",
    "ErrorReporter",
    "LoadwrightError",
    "OwnedBrowser",
    "OwnedContext",
    "SessionConfig",
    "SessionError",
    "report_error",
]
