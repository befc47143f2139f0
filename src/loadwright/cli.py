# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""loadwright CLI: one-shot probe of a page through a full session lifecycle.

Usage:
    python -m loadwright.cli probe URL [--browser NAME] [--persistent DIR | --connect ENDPOINT]
                                       [--headed] [--screenshot] [--count SELECTOR]
                                       [--options FILE.yaml] [--json-logs]
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from pathlib import Path
from typing import Any

from .errors import LoadwrightError

logger = logging.getLogger(__name__)


def _require_cli_deps() -> None:
    """Check that CLI optional dependencies are installed."""
    try:
        import yaml  # noqa: F401
        from tabulate import tabulate  # noqa: F401
    except ImportError as e:
        print(
            f"Missing CLI dependency: {e.name}\nInstall with: pip install loadwright[cli]",
            file=sys.stderr,
        )
        sys.exit(1)


def _load_options(path_str: str | None) -> dict[str, Any]:
    """Read launch/connect options from a YAML mapping file."""
    if not path_str:
        return {}
    import yaml

    data = yaml.safe_load(Path(path_str).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path_str}: expected a mapping of options, got {type(data).__name__}")
    return data


def cmd_probe(args: argparse.Namespace) -> None:
    """Establish a session, visit URL, print metrics, tear down."""
    _require_cli_deps()
    from tabulate import tabulate

    from .bridge import Automation
    from .config import SessionConfig
    from .logging_config import bind_handle, unbind_handle

    config = SessionConfig.from_env()
    if args.browser:
        config = dataclasses.replace(config, browser_type=args.browser)
    options = _load_options(args.options)

    with Automation(config) as pw:
        bind_handle(pw.handle_id)
        try:
            if args.connect:
                pw.connect(args.connect, options)
            else:
                options.setdefault("headless", not args.headed)
                if args.persistent:
                    pw.launch_persistent(args.persistent, options)
                else:
                    pw.launch(options)
                pw.new_page()

            status = pw.goto(args.url, {"waitUntil": "load"})
            rows: list[list[Any]] = [["url", args.url], ["status", status if status is not None else "-"]]
            rows.extend([name, value] for name, value in pw.metrics.snapshot().items())
            for selector in args.count or []:
                rows.append([f"count({selector})", pw.count_all(selector)])
            if args.screenshot:
                rows.append(["screenshot", str(pw.screenshot())])
            print(tabulate(rows, headers=["Metric", "Value"], tablefmt="simple"))
        finally:
            unbind_handle()


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="loadwright CLI",
        prog="python -m loadwright.cli",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    parser.add_argument("--json-logs", action="store_true", help="Emit JSON log lines on stderr")
    subparsers = parser.add_subparsers(dest="command", required=True)

    p_probe = subparsers.add_parser(
        "probe",
        help="Launch or attach, visit a URL, and print paint/input metrics",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
examples:
  %(prog)s https://example.com                          Fresh headless Chromium
  %(prog)s https://example.com --browser firefox --headed
  %(prog)s https://example.com --persistent ./profile   Persistent profile directory
  %(prog)s https://example.com --connect http://localhost:9222
  %(prog)s https://example.com --count a --count img --screenshot""",
    )
    p_probe.add_argument("url", metavar="URL", help="Page to visit")
    p_probe.add_argument("--browser", choices=["chromium", "firefox", "webkit"], help="Browser type to launch")
    mode = p_probe.add_mutually_exclusive_group()
    mode.add_argument("--persistent", metavar="DIR", help="Launch a persistent context in DIR")
    mode.add_argument("--connect", metavar="ENDPOINT", help="Attach to a running browser over CDP")
    p_probe.add_argument("--headed", action="store_true", help="Show the browser window")
    p_probe.add_argument("--screenshot", action="store_true", help="Save a screenshot of the page")
    p_probe.add_argument("--count", action="append", metavar="SELECTOR", help="Count elements (repeatable)")
    p_probe.add_argument("--options", metavar="FILE", help="YAML file of launch/connect options")

    commands = {"probe": cmd_probe}

    args = parser.parse_args(argv)

    from .config import SessionConfig
    from .logging_config import configure

    try:
        env_config = SessionConfig.from_env()
        configure(
            json_output=args.json_logs or env_config.json_logs,
            level="DEBUG" if args.verbose else env_config.log_level,
        )
        commands[args.command](args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        sys.exit(130)
    except SystemExit:
        raise
    except LoadwrightError as e:
        print(f"loadwright: {type(e).__name__}: {e}", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"loadwright: unexpected error: {e}", file=sys.stderr)
        if args.verbose:
            import traceback

            traceback.print_exc(file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
