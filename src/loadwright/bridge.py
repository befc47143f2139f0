# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Script-facing handle: one ``Automation`` per virtual user.

Wires ``BrowserSession`` (lifecycle), ``ActionDispatcher`` (page actions)
and ``PageMetrics`` (timeline metrics) behind the fixed operation set a
load-test script calls. ``exports()`` maps the script-side camelCase names
to bound methods for the embedding runtime.

Usage::

    with Automation() as pw:
        pw.launch({"headless": True})
        pw.new_page()
        pw.goto("https://example.test")
        print(pw.first_contentful_paint())
"""

from __future__ import annotations

import uuid
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

from .actions import ActionDispatcher, Options
from .config import SessionConfig
from .metrics import PageMetrics
from .reporter import ErrorReporter, default_reporter
from .session import BrowserSession

MODULE_NAME = "k6/x/playwright"

# script name → Automation attribute
SCRIPT_NAMES: dict[str, str] = {
    "launch": "launch",
    "launchPersistent": "launch_persistent",
    "connect": "connect",
    "newPage": "new_page",
    "kill": "kill",
    "goto": "goto",
    "waitForSelector": "wait_for_selector",
    "waitForNavigation": "wait_for_navigation",
    "waitForLoadState": "wait_for_load_state",
    "countAll": "count_all",
    "countByState": "count_by_state",
    "click": "click",
    "type": "type",
    "pressKey": "press_key",
    "sleep": "sleep",
    "screenshot": "screenshot",
    "focus": "focus",
    "fill": "fill",
    "selectOptions": "select_options",
    "check": "check",
    "uncheck": "uncheck",
    "dragAndDrop": "drag_and_drop",
    "evaluate": "evaluate",
    "reload": "reload",
    "firstPaint": "first_paint",
    "firstContentfulPaint": "first_contentful_paint",
    "timeToMinimallyInteractive": "time_to_minimally_interactive",
    "firstInputDelay": "first_input_delay",
    "cookies": "cookies",
}


class Automation:
    """Root handle surfaced to scripts."""

    def __init__(
        self,
        config: SessionConfig | None = None,
        *,
        reporter: ErrorReporter | None = None,
        driver_factory: Callable[[], Any] | None = None,
    ) -> None:
        self.handle_id = uuid.uuid4().hex[:12]
        self.reporter = reporter or default_reporter()
        session_kwargs: dict[str, Any] = {"reporter": self.reporter}
        if driver_factory is not None:
            session_kwargs["driver_factory"] = driver_factory
        self.session = BrowserSession(config, **session_kwargs)
        self.actions = ActionDispatcher(self.session, reporter=self.reporter)
        self.metrics = PageMetrics(self.session, reporter=self.reporter)

    def exports(self) -> dict[str, Callable[..., Any]]:
        """Script name → bound method, for registration under MODULE_NAME."""
        return {js: getattr(self, attr) for js, attr in SCRIPT_NAMES.items()}

    def __enter__(self) -> Automation:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.session.__exit__(exc_type, exc, tb)

    # ── Session ──────────────────────────────────────────────────────

    def launch(self, options: Options = None) -> None:
        self.session.launch(options)

    def launch_persistent(self, user_data_dir: str, options: Options = None) -> None:
        self.session.launch_persistent(user_data_dir, options)

    def connect(self, endpoint_url: str, options: Options = None) -> None:
        self.session.connect(endpoint_url, options)

    def new_page(self) -> None:
        self.session.new_page()

    def kill(self) -> None:
        self.session.kill()

    # ── Actions ──────────────────────────────────────────────────────

    def goto(self, url: str, opts: Options = None) -> int | None:
        return self.actions.goto(url, opts)

    def wait_for_selector(self, selector: str, opts: Options = None) -> None:
        self.actions.wait_for_selector(selector, opts)

    def wait_for_navigation(self, opts: Options = None) -> None:
        self.actions.wait_for_navigation(opts)

    def wait_for_load_state(self, state: str = "load") -> None:
        self.actions.wait_for_load_state(state)

    def count_all(self, selector: str) -> int:
        return self.actions.count_all(selector)

    def count_by_state(self, selector: str, state: str) -> int:
        return self.actions.count_by_state(selector, state)

    def click(self, selector: str, opts: Options = None) -> None:
        self.actions.click(selector, opts)

    def type(self, selector: str, text: str, opts: Options = None) -> None:
        self.actions.type(selector, text, opts)

    def press_key(self, selector: str, key: str, opts: Options = None) -> None:
        self.actions.press_key(selector, key, opts)

    def sleep(self, ms: float) -> None:
        self.actions.sleep(ms)

    def screenshot(self, filename: str = "", perm: int | None = None, opts: Options = None) -> Path:
        return self.actions.screenshot(filename, perm, opts)

    def focus(self, selector: str, opts: Options = None) -> None:
        self.actions.focus(selector, opts)

    def fill(self, selector: str, value: str, opts: Options = None) -> None:
        self.actions.fill(selector, value, opts)

    def select_options(self, selector: str, values: Any, opts: Options = None) -> list[str]:
        return self.actions.select_options(selector, values, opts)

    def check(self, selector: str, opts: Options = None) -> None:
        self.actions.check(selector, opts)

    def uncheck(self, selector: str, opts: Options = None) -> None:
        self.actions.uncheck(selector, opts)

    def drag_and_drop(self, source: str, target: str, opts: Options = None) -> None:
        self.actions.drag_and_drop(source, target, opts)

    def evaluate(self, expression: str, arg: Any = None) -> Any:
        return self.actions.evaluate(expression, arg)

    def reload(self, opts: Options = None) -> None:
        self.actions.reload(opts)

    def cookies(self) -> list[Mapping[str, Any]] | None:
        return self.actions.cookies()

    # ── Metrics ──────────────────────────────────────────────────────

    def first_paint(self) -> int:
        return self.metrics.first_paint()

    def first_contentful_paint(self) -> int:
        return self.metrics.first_contentful_paint()

    def time_to_minimally_interactive(self) -> int:
        return self.metrics.time_to_minimally_interactive()

    def first_input_delay(self) -> int:
        return self.metrics.first_input_delay()
