# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Playwright session lifecycle for one scripted virtual user.

A ``BrowserSession`` owns exactly one browser-side resource, either a
standalone ``Browser`` (fresh launch, CDP attach) or a persistent
``BrowserContext``, plus the single active ``Page`` all actions target.

Lifecycle::

    session = BrowserSession()
    session.launch({"headless": True})
    session.new_page()
    ...
    session.kill()

Dependencies: errors.py, reporter.py, config.py, options.py only.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from contextlib import suppress
from dataclasses import dataclass
from typing import Any

from playwright.sync_api import Browser, BrowserContext, Page, Playwright, sync_playwright

from .config import SessionConfig
from .errors import (
    CloseError,
    ConnectError,
    DriverStartError,
    DriverStopError,
    LaunchError,
    LoadwrightError,
    NoActivePageError,
    NoContextError,
    NoPageError,
    NoSessionError,
    PageCreateError,
    SessionActiveError,
)
from .options import to_kwargs
from .reporter import ErrorReporter, default_reporter

logger = logging.getLogger(__name__)

_NO_SESSION_MSG = "no browser or browser context attached"
_NO_PAGE_MSG = "no active page; call new_page() after establishing a session"


# ---------------------------------------------------------------------------
# Ownership: exactly one arm is held by an established session
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class OwnedBrowser:
    """Standalone browser (fresh launch or CDP attach)."""

    browser: Browser

    def new_page(self) -> Page:
        return self.browser.new_page()

    def close(self) -> None:
        self.browser.close()

    def cookies(self) -> list:
        contexts = self.browser.contexts
        if not contexts:
            raise NoContextError("browser has no contexts to read cookies from")
        return contexts[0].cookies()


@dataclass(frozen=True, slots=True)
class OwnedContext:
    """Persistent context backed by a user-data directory."""

    context: BrowserContext

    def new_page(self) -> Page:
        return self.context.new_page()

    def close(self) -> None:
        self.context.close()

    def cookies(self) -> list:
        return self.context.cookies()


Ownership = OwnedBrowser | OwnedContext


# ---------------------------------------------------------------------------
# BrowserSession
# ---------------------------------------------------------------------------


class BrowserSession:
    """One browser-or-context/page triple with explicit establish/kill."""

    def __init__(
        self,
        config: SessionConfig | None = None,
        *,
        reporter: ErrorReporter | None = None,
        driver_factory: Callable[[], Any] | None = None,
    ) -> None:
        self.config = config or SessionConfig()
        self.reporter = reporter or default_reporter()
        self._driver_factory = driver_factory or sync_playwright
        self._driver: Playwright | None = None
        self._owner: Ownership | None = None
        self._page: Page | None = None

    # ── State ────────────────────────────────────────────────────────

    @property
    def owner(self) -> Ownership | None:
        return self._owner

    @property
    def is_established(self) -> bool:
        return self._owner is not None

    @property
    def browser(self) -> Browser | None:
        return self._owner.browser if isinstance(self._owner, OwnedBrowser) else None

    @property
    def context(self) -> BrowserContext | None:
        return self._owner.context if isinstance(self._owner, OwnedContext) else None

    @property
    def page(self) -> Page:
        """The active page. Raises NoActivePageError (reported) when absent."""
        if self._page is None:
            err = NoActivePageError(_NO_PAGE_MSG)
            self.reporter.report(err, "loadwright: no active page")
            raise err
        return self._page

    @property
    def has_page(self) -> bool:
        return self._page is not None

    def require_owner(self) -> Ownership:
        if self._owner is None:
            err = NoSessionError(_NO_SESSION_MSG)
            self.reporter.report(err, "loadwright: no session")
            raise err
        return self._owner

    # ── Establish ────────────────────────────────────────────────────

    def launch(self, options: Mapping[str, Any] | None = None) -> None:
        """Start the driver and launch a fresh browser."""
        driver = self._start_driver()
        browser_type = getattr(driver, self.config.browser_type)
        try:
            browser = browser_type.launch(**to_kwargs(options))
        except Exception as exc:
            self.reporter.report(exc, f"loadwright: cannot launch {self.config.browser_type}")
            self._abandon_driver(driver)
            raise LaunchError(f"cannot launch {self.config.browser_type}: {exc}") from exc
        self._driver = driver
        self._owner = OwnedBrowser(browser)
        logger.info("Browser launched (type=%s)", self.config.browser_type)

    def launch_persistent(self, user_data_dir: str, options: Mapping[str, Any] | None = None) -> None:
        """Start the driver and launch a persistent context on *user_data_dir*."""
        driver = self._start_driver()
        browser_type = getattr(driver, self.config.browser_type)
        try:
            context = browser_type.launch_persistent_context(user_data_dir, **to_kwargs(options))
        except Exception as exc:
            self.reporter.report(exc, f"loadwright: cannot launch persistent {self.config.browser_type}")
            self._abandon_driver(driver)
            raise LaunchError(f"cannot launch persistent context in {user_data_dir!r}: {exc}") from exc
        self._driver = driver
        self._owner = OwnedContext(context)
        logger.info("Persistent context launched (type=%s, dir=%s)", self.config.browser_type, user_data_dir)

    def connect(self, endpoint_url: str, options: Mapping[str, Any] | None = None) -> None:
        """Attach to a running Chromium over CDP and adopt its first page.

        CDP attach is Chromium-only regardless of ``config.browser_type``.
        """
        driver = self._start_driver()
        try:
            browser = driver.chromium.connect_over_cdp(endpoint_url, **to_kwargs(options))
        except Exception as exc:
            self.reporter.report(exc, "loadwright: cannot connect to browser")
            self._abandon_driver(driver)
            raise ConnectError(f"cannot connect to {endpoint_url}: {exc}") from exc

        contexts = browser.contexts
        if not contexts:
            err = NoContextError(f"browser at {endpoint_url} exposes no contexts")
            self.reporter.report(err, "loadwright: cannot adopt context")
            self._abandon_driver(driver, browser)
            raise err
        pages = contexts[0].pages
        if not pages:
            err = NoPageError(f"first context of browser at {endpoint_url} has no pages")
            self.reporter.report(err, "loadwright: cannot adopt page")
            self._abandon_driver(driver, browser)
            raise err

        self._driver = driver
        self._owner = OwnedBrowser(browser)
        self._page = pages[0]
        logger.info("Attached to browser over CDP (%d contexts)", len(contexts))

    # ── Pages ────────────────────────────────────────────────────────

    def new_page(self) -> Page:
        """Open a page in the owned browser/context and make it active.

        The previously active page stays open until kill().
        """
        owner = self.require_owner()
        try:
            page = owner.new_page()
        except Exception as exc:
            self.reporter.report(exc, "loadwright: cannot create page")
            raise PageCreateError(f"cannot create page: {exc}") from exc
        self._page = page
        logger.debug("New page created")
        return page

    # ── Teardown ─────────────────────────────────────────────────────

    def kill(self) -> None:
        """Close the owned browser/context, then stop the driver.

        A failed close leaves ownership in place (retry kill()) and skips
        the stop step.
        """
        owner = self.require_owner()
        try:
            owner.close()
        except Exception as exc:
            self.reporter.report(exc, "loadwright: cannot close browser")
            raise CloseError(f"cannot close browser: {exc}") from exc
        self._owner = None
        self._page = None

        driver, self._driver = self._driver, None
        if driver is None:
            return
        try:
            driver.stop()
        except Exception as exc:
            self.reporter.report(exc, "loadwright: cannot stop playwright")
            raise DriverStopError(f"cannot stop playwright: {exc}") from exc
        logger.info("Browser session stopped")

    def __enter__(self) -> BrowserSession:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._owner is None:
            return
        if exc_type is None:
            self.kill()
            return
        # Teardown failures are reported; the in-flight exception wins.
        with suppress(LoadwrightError):
            self.kill()

    # ── Internal ─────────────────────────────────────────────────────

    def _start_driver(self) -> Playwright:
        if self._owner is not None:
            err = SessionActiveError("session already established; call kill() first")
            self.reporter.report(err, "loadwright: session already active")
            raise err
        try:
            return self._driver_factory().start()
        except Exception as exc:
            self.reporter.report(exc, "loadwright: cannot start playwright")
            raise DriverStartError(f"cannot start playwright: {exc}") from exc

    @staticmethod
    def _abandon_driver(driver: Playwright, browser: Browser | None = None) -> None:
        """Drop a half-established session so no partial state survives."""
        if browser is not None:
            with suppress(Exception):
                browser.close()
        with suppress(Exception):
            driver.stop()
