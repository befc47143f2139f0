# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Option objects from scripts → Playwright keyword arguments.

Scripts pass camelCase option objects (``{"timeout": 5000, "waitUntil":
"load"}``). Keys are converted to the snake_case keyword names the sync API
expects and ``None`` values are dropped; values are forwarded untouched.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])([A-Z])")


def snake_case(key: str) -> str:
    """``waitUntil`` → ``wait_until``; already-snake keys pass through."""
    return _CAMEL_BOUNDARY.sub(r"_\1", key).lower()


def to_kwargs(opts: Mapping[str, Any] | None) -> dict[str, Any]:
    if not opts:
        return {}
    return {snake_case(k): v for k, v in opts.items() if v is not None}


def select_values(values: Any) -> dict[str, Any]:
    """Map a script-side option selection onto ``select_option`` kwargs.

    Accepts a single value, a list of values, or a mapping with any of
    ``values`` / ``indexes`` / ``labels``.
    """
    if values is None:
        return {}
    if isinstance(values, str):
        return {"value": values}
    if isinstance(values, Mapping):
        kwargs: dict[str, Any] = {}
        for src, dst in (("values", "value"), ("indexes", "index"), ("labels", "label")):
            if values.get(src) is not None:
                kwargs[dst] = values[src]
        return kwargs
    return {"value": list(values)}
