# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Shared test configuration and fixtures."""

try:
    import loadwright  # noqa: F401
except ImportError:
    raise ImportError("loadwright is not installed. Run: pip install -e '.[dev]'") from None

import pytest

from loadwright.reporter import ErrorReporter


@pytest.fixture(autouse=True)
def _block_real_driver(request, monkeypatch):
    """Safety net: prevent real Playwright driver processes in unit tests.

    Tests pass ``driver_factory=`` explicitly (see ``_driver_fakes``).
    Tests that forget get a clear error instead of silently launching a
    browser. Opt out with ``@pytest.mark.allow_real_driver``.
    """
    if "allow_real_driver" in request.keywords:
        return

    def _no_real_driver():
        raise RuntimeError("Test tried to start a real Playwright driver. Pass driver_factory= in your test.")

    monkeypatch.setattr("loadwright.session.sync_playwright", _no_real_driver)


@pytest.fixture
def lines() -> list[str]:
    """Captured reporter output."""
    return []


@pytest.fixture
def reporter(lines) -> ErrorReporter:
    return ErrorReporter(lines.append)
