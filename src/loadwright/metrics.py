# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Real-user-monitoring metrics from the page's performance timeline.

Each metric evaluates a fixed snippet that serializes timeline entries to
JSON, then projects a numeric field by dotted path (``0.startTime``).
Values are whole milliseconds. 0 means "no entry yet" or "evaluation
failed". The two are not distinguishable by the return value, but evaluation
failures are still reported.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from .errors import EvaluateError
from .reporter import ErrorReporter
from .session import BrowserSession

logger = logging.getLogger(__name__)

# ── Timeline snippets (static, no interpolation) ───────────────────

FIRST_PAINT_JS = "JSON.stringify(performance.getEntriesByName('first-paint'))"
FIRST_CONTENTFUL_PAINT_JS = "JSON.stringify(performance.getEntriesByName('first-contentful-paint'))"
FIRST_INPUT_JS = "JSON.stringify(performance.getEntriesByType('first-input'))"


def project(entries_json: str, path: str) -> Any:
    """Resolve a dotted *path* (``0.startTime``) inside JSON text.

    Numeric segments index lists, other segments index objects. Returns
    None for malformed JSON or a missing segment.
    """
    try:
        node: Any = json.loads(entries_json)
    except (TypeError, ValueError):
        return None
    for segment in path.split("."):
        if isinstance(node, list) and segment.isdigit():
            idx = int(segment)
            if idx >= len(node):
                return None
            node = node[idx]
        elif isinstance(node, dict) and segment in node:
            node = node[segment]
        else:
            return None
    return node


def as_millis(value: Any) -> int:
    """Truncate a timeline value to non-negative whole milliseconds."""
    if isinstance(value, bool) or not isinstance(value, int | float):
        return 0
    return int(value) if value > 0 else 0


class PageMetrics:
    """Paint and input-latency metrics for the session's active page."""

    def __init__(self, session: BrowserSession, *, reporter: ErrorReporter | None = None) -> None:
        self.session = session
        self.reporter = reporter or session.reporter

    def _entries(self, snippet: str, label: str) -> str | None:
        page = self.session.page
        try:
            raw = page.evaluate(snippet)
        except Exception as exc:
            err = EvaluateError(f"{label} evaluation failed: {exc}", action=label)
            self.reporter.report(err, f"loadwright: error with getting the {label} entries")
            return None
        return raw if isinstance(raw, str) else json.dumps(raw, default=str)

    def _start_time(self, snippet: str, label: str) -> int:
        text = self._entries(snippet, label)
        if text is None:
            return 0
        return as_millis(project(text, "0.startTime"))

    def first_paint(self) -> int:
        return self._start_time(FIRST_PAINT_JS, "first-paint")

    def first_contentful_paint(self) -> int:
        return self._start_time(FIRST_CONTENTFUL_PAINT_JS, "first-contentful-paint")

    def time_to_minimally_interactive(self) -> int:
        """Start time of the first input event."""
        return self._start_time(FIRST_INPUT_JS, "first-input")

    def first_input_delay(self) -> int:
        """``processingStart - startTime`` of the first input (https://web.dev/fid/)."""
        text = self._entries(FIRST_INPUT_JS, "first-input")
        if text is None:
            return 0
        delay = as_millis(project(text, "0.processingStart")) - as_millis(project(text, "0.startTime"))
        return max(delay, 0)

    def snapshot(self) -> dict[str, int]:
        """All four metrics, keyed by their script names."""
        return {
            "firstPaint": self.first_paint(),
            "firstContentfulPaint": self.first_contentful_paint(),
            "timeToMinimallyInteractive": self.time_to_minimally_interactive(),
            "firstInputDelay": self.first_input_delay(),
        }
