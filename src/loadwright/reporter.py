# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Error side channel: one log line per failure, never alters control flow.

Components receive an ``ErrorReporter`` at construction. The default sink
writes to the ``loadwright.errors`` logger; tests inject a list sink to
capture lines deterministically.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

logger = logging.getLogger("loadwright.errors")

# Stable prefix shared by every reported message.
MESSAGE_PREFIX = "loadwright"


def _log_sink(line: str) -> None:
    logger.error(line)


class ErrorReporter:
    """Format and emit failures to a sink."""

    __slots__ = ("_sink",)

    def __init__(self, sink: Callable[[str], None] | None = None) -> None:
        self._sink = sink or _log_sink

    def report(self, error: BaseException | None, message: str) -> None:
        """Emit ``"<message>: <error>"`` if *error* is not None."""
        if error is None:
            return
        self._sink(f"{message}: {error}")


_default_reporter = ErrorReporter()


def default_reporter() -> ErrorReporter:
    """Return the process-wide reporter backed by the errors logger."""
    return _default_reporter


def report_error(error: BaseException | None, message: str) -> None:
    """Report through the process-wide reporter."""
    _default_reporter.report(error, message)
