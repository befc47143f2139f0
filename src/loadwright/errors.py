# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""loadwright exception hierarchy.

All loadwright errors inherit from LoadwrightError. Session lifecycle
failures derive from SessionError, page-scoped action failures from
ActionError. Driver exceptions are always chained (``raise ... from exc``).
"""

from __future__ import annotations


class LoadwrightError(Exception):
    """Base exception for all loadwright errors."""


# ── Session lifecycle ────────────────────────────────────────────────


class SessionError(LoadwrightError):
    """Session establishment, page creation, or teardown failure."""


class DriverStartError(SessionError):
    """The automation driver process could not be started."""


class DriverStopError(SessionError):
    """The automation driver process could not be stopped."""


class LaunchError(SessionError):
    """The browser (or persistent context) failed to launch."""


class ConnectError(SessionError):
    """Attaching to a running browser over CDP failed."""


class NoContextError(SessionError):
    """The attached browser exposes no browser contexts."""


class NoPageError(SessionError):
    """The attached browser's first context has no open pages."""


class NoSessionError(SessionError):
    """No browser or browser context is attached to the handle."""


class NoActivePageError(SessionError):
    """A page-scoped action was called without an active page."""


class SessionActiveError(SessionError):
    """An establish call was made on a handle that already owns a browser."""


class PageCreateError(SessionError):
    """The owned browser or context failed to open a new page."""


class CloseError(SessionError):
    """The owned browser or context failed to close."""


# ── Actions ──────────────────────────────────────────────────────────


class ActionError(LoadwrightError):
    """A page-scoped action failed in the driver."""

    def __init__(self, message: str, *, action: str = "") -> None:
        super().__init__(message)
        self.action = action


class NavigationError(ActionError):
    """Navigation (goto) failed."""


class WaitError(ActionError):
    """A wait condition failed."""


class WaitTimeoutError(WaitError):
    """A wait condition was not met within its timeout."""


class QueryError(ActionError):
    """Querying elements by selector failed."""


class InvalidStateError(ActionError):
    """count_by_state was given an unknown element state."""


class EvaluateError(ActionError):
    """Script evaluation in the page failed."""


class ScreenshotError(ActionError):
    """Capturing a screenshot failed."""


class FileWriteError(ActionError):
    """Persisting a captured artifact to disk failed."""


class CookieError(ActionError):
    """Reading cookies from the owned context failed."""
