# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Mock Playwright driver objects shared by the session/action tests."""

from __future__ import annotations

from unittest.mock import MagicMock

from loadwright.config import SessionConfig
from loadwright.reporter import ErrorReporter
from loadwright.session import BrowserSession

# Minimal valid PNG bytes (1x1 transparent pixel)
FAKE_PNG = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01\x08\x06\x00\x00\x00\x1f\x15\xc4\x89"


def make_driver(
    *,
    browser: MagicMock | None = None,
    context: MagicMock | None = None,
    cdp_browser: MagicMock | None = None,
) -> tuple[MagicMock, MagicMock]:
    """Return ``(factory, driver)`` where ``factory().start()`` is *driver*.

    Every browser type launches *browser*, launches *context* persistently,
    and Chromium's CDP attach returns *cdp_browser*.
    """
    driver = MagicMock(name="playwright")
    browser = browser or MagicMock(name="browser")
    context = context or MagicMock(name="context")
    for name in ("chromium", "firefox", "webkit"):
        bt = getattr(driver, name)
        bt.launch.return_value = browser
        bt.launch_persistent_context.return_value = context
    if cdp_browser is not None:
        driver.chromium.connect_over_cdp.return_value = cdp_browser

    factory = MagicMock(name="sync_playwright")
    factory.return_value.start.return_value = driver
    return factory, driver


def make_page() -> MagicMock:
    page = MagicMock(name="page")
    page.screenshot.return_value = FAKE_PNG
    page.goto.return_value = MagicMock(status=200)
    return page


def make_cdp_browser(contexts: int = 1, pages: int = 1) -> MagicMock:
    browser = MagicMock(name="cdp_browser")
    ctxs = []
    for _ in range(contexts):
        ctx = MagicMock(name="cdp_context")
        ctx.pages = [make_page() for _ in range(pages)]
        ctxs.append(ctx)
    browser.contexts = ctxs
    return browser


def started_session(
    reporter: ErrorReporter,
    *,
    page: MagicMock | None = None,
    config: SessionConfig | None = None,
) -> tuple[BrowserSession, MagicMock, MagicMock]:
    """A launched session with an active page. Returns (session, driver, page)."""
    page = page or make_page()
    browser = MagicMock(name="browser")
    browser.new_page.return_value = page
    factory, driver = make_driver(browser=browser)
    session = BrowserSession(config, reporter=reporter, driver_factory=factory)
    session.launch()
    session.new_page()
    return session, driver, page
