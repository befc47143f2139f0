# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Page-scoped action dispatch.

Every action resolves the session's active page first (NoActivePageError,
driver untouched), forwards the script's option object to the matching
Playwright call, and maps driver failures onto a typed ActionError after
reporting them.

Log-only actions: ``wait_for_load_state``, ``sleep``, ``evaluate`` and
``cookies`` report driver failures but return None instead of raising.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator, Mapping
from contextlib import contextmanager, suppress
from datetime import datetime
from pathlib import Path
from typing import Any

from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from .config import SCREENSHOT_TIMESTAMP_FORMAT
from .errors import (
    ActionError,
    CookieError,
    EvaluateError,
    FileWriteError,
    InvalidStateError,
    NavigationError,
    QueryError,
    ScreenshotError,
    WaitError,
    WaitTimeoutError,
)
from .options import select_values, to_kwargs
from .reporter import ErrorReporter
from .session import BrowserSession

logger = logging.getLogger(__name__)

Options = Mapping[str, Any] | None

# count_by_state() state → ElementHandle predicate
ELEMENT_STATES: dict[str, str] = {
    "visible": "is_visible",
    "hidden": "is_hidden",
    "enabled": "is_enabled",
    "disabled": "is_disabled",
    "editable": "is_editable",
    "checked": "is_checked",
}

# Load states accepted by Page.wait_for_load_state ("commit" is goto-only).
_LOAD_STATES = ("load", "domcontentloaded", "networkidle")


class ActionDispatcher:
    """One method per scripted page action against a BrowserSession."""

    def __init__(self, session: BrowserSession, *, reporter: ErrorReporter | None = None) -> None:
        self.session = session
        self.reporter = reporter or session.reporter

    @contextmanager
    def _driver_call(
        self,
        action: str,
        message: str,
        error_cls: type[ActionError] = ActionError,
    ) -> Iterator[None]:
        try:
            yield
        except Exception as exc:
            self.reporter.report(exc, message)
            raise error_cls(f"{action} failed: {exc}", action=action) from exc

    # ── Navigation & waiting ─────────────────────────────────────────

    def goto(self, url: str, opts: Options = None) -> int | None:
        """Navigate the active page. Returns the HTTP status when known."""
        page = self.session.page
        with self._driver_call("goto", "loadwright: error when goto url", NavigationError):
            response = page.goto(url, **to_kwargs(opts))
        logger.debug("goto %s", url)
        return response.status if response is not None else None

    def reload(self, opts: Options = None) -> None:
        page = self.session.page
        with self._driver_call("reload", "loadwright: error when reloading the page"):
            page.reload(**to_kwargs(opts))

    def wait_for_selector(self, selector: str, opts: Options = None) -> None:
        page = self.session.page
        try:
            page.wait_for_selector(selector, **to_kwargs(opts))
        except PlaywrightTimeoutError as exc:
            self.reporter.report(exc, "loadwright: timed out waiting for selector")
            raise WaitTimeoutError(f"wait_for_selector({selector!r}) timed out", action="wait_for_selector") from exc
        except Exception as exc:
            self.reporter.report(exc, "loadwright: error waiting for selector")
            raise WaitError(f"wait_for_selector({selector!r}) failed: {exc}", action="wait_for_selector") from exc

    def wait_for_navigation(self, opts: Options = None) -> None:
        """Block until the main frame navigates and reaches ``waitUntil``.

        With a ``url`` option, waits for the page URL to match instead.
        """
        page = self.session.page
        kwargs = to_kwargs(opts)
        url = kwargs.pop("url", None)
        wait_until = kwargs.pop("wait_until", "load")
        timeout = kwargs.pop("timeout", None)
        try:
            if url is not None:
                page.wait_for_url(url, wait_until=wait_until, timeout=timeout)
            else:
                page.wait_for_event(
                    "framenavigated",
                    predicate=lambda frame: frame == page.main_frame,
                    timeout=timeout,
                )
                if wait_until in _LOAD_STATES:
                    page.wait_for_load_state(wait_until, timeout=timeout)
        except PlaywrightTimeoutError as exc:
            self.reporter.report(exc, "loadwright: timed out waiting for navigation")
            raise WaitTimeoutError("wait_for_navigation timed out", action="wait_for_navigation") from exc
        except Exception as exc:
            self.reporter.report(exc, "loadwright: error waiting for navigation")
            raise WaitError(f"wait_for_navigation failed: {exc}", action="wait_for_navigation") from exc

    def wait_for_load_state(self, state: str = "load") -> None:
        """Block until *state* is reached. Failures are logged, never raised."""
        page = self.session.page
        try:
            page.wait_for_load_state(state)
        except Exception as exc:
            self.reporter.report(exc, "loadwright: error waiting for load state")

    def sleep(self, ms: float) -> None:
        """Pause the virtual user for *ms* milliseconds on the page clock."""
        page = self.session.page
        try:
            page.wait_for_timeout(ms)
        except Exception as exc:
            self.reporter.report(exc, "loadwright: error while sleeping")

    # ── Queries ──────────────────────────────────────────────────────

    def count_all(self, selector: str) -> int:
        page = self.session.page
        with self._driver_call("count_all", "loadwright: error querying selector", QueryError):
            elements = page.query_selector_all(selector)
        return len(elements)

    def count_by_state(self, selector: str, state: str) -> int:
        """Count elements matching *selector* that are in *state*.

        An unknown state aborts the whole count, independent of how many
        elements match. The active page is still resolved first.
        """
        page = self.session.page
        predicate = ELEMENT_STATES.get(state)
        if predicate is None:
            err = InvalidStateError(
                f"invalid state {state!r}, expected one of {', '.join(ELEMENT_STATES)}",
                action="count_by_state",
            )
            self.reporter.report(err, "loadwright: invalid state")
            raise err

        with self._driver_call("count_by_state", "loadwright: error querying selector", QueryError):
            elements = page.query_selector_all(selector)
        count = 0
        with self._driver_call("count_by_state", f"loadwright: error checking {state} state", QueryError):
            for element in elements:
                if getattr(element, predicate)():
                    count += 1
        return count

    # ── Interaction ──────────────────────────────────────────────────

    def click(self, selector: str, opts: Options = None) -> None:
        page = self.session.page
        with self._driver_call("click", "loadwright: error with clicking"):
            page.click(selector, **to_kwargs(opts))

    def type(self, selector: str, text: str, opts: Options = None) -> None:
        page = self.session.page
        with self._driver_call("type", "loadwright: error with typing"):
            page.type(selector, text, **to_kwargs(opts))

    def press_key(self, selector: str, key: str, opts: Options = None) -> None:
        page = self.session.page
        with self._driver_call("press_key", "loadwright: error with pressing the key"):
            page.press(selector, key, **to_kwargs(opts))

    def focus(self, selector: str, opts: Options = None) -> None:
        page = self.session.page
        with self._driver_call("focus", "loadwright: error with focusing"):
            page.focus(selector, **to_kwargs(opts))

    def fill(self, selector: str, value: str, opts: Options = None) -> None:
        page = self.session.page
        with self._driver_call("fill", "loadwright: error with filling"):
            page.fill(selector, value, **to_kwargs(opts))

    def select_options(self, selector: str, values: Any, opts: Options = None) -> list[str]:
        """Select options in a ``<select>``; returns the selected values."""
        page = self.session.page
        with self._driver_call("select_options", "loadwright: error with selecting options"):
            return page.select_option(selector, **select_values(values), **to_kwargs(opts))

    def check(self, selector: str, opts: Options = None) -> None:
        page = self.session.page
        with self._driver_call("check", "loadwright: error with checking the field"):
            page.check(selector, **to_kwargs(opts))

    def uncheck(self, selector: str, opts: Options = None) -> None:
        page = self.session.page
        with self._driver_call("uncheck", "loadwright: error with unchecking the field"):
            page.uncheck(selector, **to_kwargs(opts))

    def drag_and_drop(self, source: str, target: str, opts: Options = None) -> None:
        page = self.session.page
        with self._driver_call("drag_and_drop", "loadwright: error with dragging and dropping"):
            page.drag_and_drop(source, target, **to_kwargs(opts))

    # ── Evaluation, artifacts, cookies ───────────────────────────────

    def evaluate(self, expression: str, arg: Any = None) -> Any:
        """Evaluate *expression* in the page; None when evaluation fails."""
        page = self.session.page
        try:
            return page.evaluate(expression, arg)
        except Exception as exc:
            err = EvaluateError(f"evaluate failed: {exc}", action="evaluate")
            self.reporter.report(err, "loadwright: error with evaluating the expression")
            return None

    def screenshot(self, filename: str = "", perm: int | None = None, opts: Options = None) -> Path:
        """Capture the active page as PNG and write it to a new file.

        Uses *filename* when given, otherwise ``<prefix><timestamp>.png``.
        Existing files are never overwritten; a ``_<n>`` suffix is added.
        """
        page = self.session.page
        kwargs = to_kwargs(opts)
        # The file is written here, with the caller's permission bits.
        kwargs.pop("path", None)
        with self._driver_call("screenshot", "loadwright: error with taking a screenshot", ScreenshotError):
            image = page.screenshot(**kwargs)

        config = self.session.config
        mode = config.screenshot_perm if perm is None else perm
        with self._driver_call(
            "screenshot",
            "loadwright: error with writing the screenshot to the file system",
            FileWriteError,
        ):
            path = _write_new_file(config.screenshot_dir, _screenshot_name(filename, config.screenshot_prefix), image, mode)
        logger.info("Screenshot saved to %s (%d bytes)", path, len(image))
        return path

    def cookies(self) -> list | None:
        """Cookies of the owned context (first context of a Browser)."""
        owner = self.session.require_owner()
        try:
            return owner.cookies()
        except Exception as exc:
            err = CookieError(f"cookies failed: {exc}", action="cookies")
            self.reporter.report(err, "loadwright: error with getting the cookies")
            return None


# ---------------------------------------------------------------------------
# File helpers
# ---------------------------------------------------------------------------


def _screenshot_name(filename: str, prefix: str) -> str:
    if filename:
        return filename if Path(filename).suffix else f"{filename}.png"
    return f"{prefix}{datetime.now().strftime(SCREENSHOT_TIMESTAMP_FORMAT)}.png"


def _write_new_file(directory: Path, name: str, data: bytes, perm: int) -> Path:
    """Create *name* under *directory* exclusively, suffixing on collision."""
    directory.mkdir(parents=True, exist_ok=True)
    base = directory / name
    candidate = base
    n = 1
    while True:
        try:
            fd = os.open(candidate, os.O_WRONLY | os.O_CREAT | os.O_EXCL, perm)
        except FileExistsError:
            candidate = base.with_name(f"{base.stem}_{n}{base.suffix}")
            n += 1
            continue
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
        except BaseException:
            # A failed capture leaves no file behind.
            with suppress(OSError):
                os.unlink(candidate)
            raise
        return candidate
