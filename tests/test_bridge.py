# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Tests for the script-facing Automation handle.

Covers the exported operation table and the full virtual-user scenario:
launch → new page → goto → count → screenshot → kill → kill again.
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from loadwright import MODULE_NAME, Automation, SessionConfig
from loadwright.bridge import SCRIPT_NAMES
from loadwright.errors import NoActivePageError, NoContextError, NoSessionError
from tests._driver_fakes import make_cdp_browser, make_driver, make_page

EXPECTED_SCRIPT_NAMES = {
    "launch",
    "launchPersistent",
    "connect",
    "newPage",
    "kill",
    "goto",
    "waitForSelector",
    "waitForNavigation",
    "waitForLoadState",
    "countAll",
    "countByState",
    "click",
    "type",
    "pressKey",
    "sleep",
    "screenshot",
    "focus",
    "fill",
    "selectOptions",
    "check",
    "uncheck",
    "dragAndDrop",
    "evaluate",
    "reload",
    "firstPaint",
    "firstContentfulPaint",
    "timeToMinimallyInteractive",
    "firstInputDelay",
    "cookies",
}


class TestExports:
    def test_module_name(self):
        assert MODULE_NAME == "k6/x/playwright"

    def test_operation_set(self):
        assert set(SCRIPT_NAMES) == EXPECTED_SCRIPT_NAMES

    def test_exports_are_bound_methods(self, reporter):
        pw = Automation(reporter=reporter)
        exports = pw.exports()
        assert set(exports) == EXPECTED_SCRIPT_NAMES
        assert exports["countByState"] == pw.count_by_state
        assert all(callable(fn) for fn in exports.values())

    def test_handle_ids_are_unique(self, reporter):
        assert Automation(reporter=reporter).handle_id != Automation(reporter=reporter).handle_id


class TestScenario:
    def test_fresh_session_end_to_end(self, reporter, lines, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        page = make_page()
        page.query_selector_all.return_value = [MagicMock()] * 4
        browser = MagicMock(name="browser")
        browser.new_page.return_value = page
        factory, driver = make_driver(browser=browser)
        order: list[str] = []
        browser.close.side_effect = lambda: order.append("close")
        driver.stop.side_effect = lambda: order.append("stop")

        pw = Automation(reporter=reporter, driver_factory=factory)
        pw.launch({"headless": True})
        pw.new_page()
        assert pw.session.browser is browser
        assert pw.session.context is None

        assert pw.goto("https://example.test") == 200
        assert pw.count_all("div") == 4

        pw.screenshot("", 0o644, {})
        assert len(list(tmp_path.iterdir())) == 1

        pw.kill()
        assert order == ["close", "stop"]
        with pytest.raises(NoSessionError):
            pw.kill()
        assert lines == ["loadwright: no session: no browser or browser context attached"]

    def test_actions_before_launch_never_reach_driver(self, reporter):
        factory = MagicMock()
        pw = Automation(reporter=reporter, driver_factory=factory)
        with pytest.raises(NoActivePageError):
            pw.goto("https://example.test")
        with pytest.raises(NoActivePageError):
            pw.first_paint()
        with pytest.raises(NoSessionError):
            pw.cookies()
        factory.assert_not_called()

    def test_attach_without_contexts(self, reporter):
        factory, _ = make_driver(cdp_browser=make_cdp_browser(contexts=0))
        pw = Automation(reporter=reporter, driver_factory=factory)
        with pytest.raises(NoContextError):
            pw.connect("http://localhost:9222")
        assert not pw.session.is_established

    def test_attach_then_act_on_adopted_page(self, reporter):
        cdp = make_cdp_browser()
        factory, _ = make_driver(cdp_browser=cdp)
        pw = Automation(reporter=reporter, driver_factory=factory)
        pw.connect("http://localhost:9222")
        pw.click("#login")
        cdp.contexts[0].pages[0].click.assert_called_once_with("#login")

    def test_persistent_session_routes_through_context(self, reporter):
        context = MagicMock(name="context")
        context.new_page.return_value = make_page()
        factory, _ = make_driver(context=context)
        pw = Automation(SessionConfig(browser_type="webkit"), reporter=reporter, driver_factory=factory)
        pw.launch_persistent("/tmp/profile")
        pw.new_page()
        context.new_page.assert_called_once_with()
        assert pw.session.browser is None

    def test_context_manager_kills(self, reporter):
        factory, driver = make_driver()
        with Automation(reporter=reporter, driver_factory=factory) as pw:
            pw.launch()
            pw.new_page()
        driver.stop.assert_called_once()
        assert not pw.session.is_established

    def test_context_manager_teardown_failure_does_not_mask_script_error(self, reporter, lines):
        browser = MagicMock(name="browser")
        browser.close.side_effect = RuntimeError("close hung")
        factory, _ = make_driver(browser=browser)
        with pytest.raises(NoActivePageError):
            with Automation(reporter=reporter, driver_factory=factory) as pw:
                pw.launch()
                pw.goto("https://example.test")
        assert lines[-1] == "loadwright: cannot close browser: close hung"
