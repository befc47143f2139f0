# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""structlog + stdlib bridge for loadwright log output.

Human-readable ConsoleRenderer for interactive runs, JSONRenderer when the
load-test output is shipped to an aggregator. Leaf module, no loadwright
imports, safe to call before any session is created.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

import structlog

# Third-party loggers that flood DEBUG output during browser automation.
_NOISY_LOGGERS = ("asyncio", "playwright", "greenlet")

# Context key carrying the Automation handle id (see bind_handle).
HANDLE_KEY = "handle_id"


def _pre_chain() -> list:
    """Processors applied to both structlog and foreign stdlib records."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]


def _formatter(json_output: bool) -> structlog.stdlib.ProcessorFormatter:
    # Load-test stderr is usually captured to a file, so no ANSI colours.
    final = structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer(colors=False)
    return structlog.stdlib.ProcessorFormatter(
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, final],
        foreign_pre_chain=_pre_chain(),
    )


def _resolve_level(level: str) -> int:
    value = logging.getLevelName(level.upper())
    return value if isinstance(value, int) else logging.INFO


def configure(*, json_output: bool = False, level: str = "INFO", stream: TextIO | None = None) -> None:
    """Route stdlib and structlog output through one stderr handler.

    Args:
        json_output: True for JSON lines, False for console rendering.
        level: Root logger level name; unknown names fall back to INFO.
        stream: Destination stream (default ``sys.stderr`` so stdout stays
            free for script output).

    Calling it again replaces the previous handler, so a CLI can switch
    renderers after parsing its flags.
    """
    structlog.configure(
        processors=[*_pre_chain(), structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(_formatter(json_output))

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(_resolve_level(level))

    quiet = max(root.level, logging.WARNING)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(quiet)


def bind_handle(handle_id: str) -> None:
    """Attach ``handle_id`` to every subsequent log line in this context."""
    structlog.contextvars.bind_contextvars(**{HANDLE_KEY: handle_id})


def unbind_handle() -> None:
    structlog.contextvars.unbind_contextvars(HANDLE_KEY)
