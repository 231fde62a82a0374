"""Command line shell for recording tasks."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from tasklog_engine.adapters import log_file
from tasklog_engine.adapters.session_history import SessionHistory
from tasklog_engine.config import Settings, load_settings
from tasklog_engine.reconcile import InvalidTaskError, record_task
from tasklog_engine.schema import format_timestamp
from tasklog_engine.suggestions import recent_contents, recent_types

logger = logging.getLogger(__name__)


def _history(settings: Settings) -> SessionHistory:
    return SessionHistory(
        command=settings.session_command,
        terminal=settings.session_terminal,
        timeout=settings.command_timeout,
    )


def _cmd_record(args: argparse.Namespace, settings: Settings) -> int:
    content = " ".join(args.content)
    try:
        result = record_task(args.type, content, settings.log_path, _history(settings))
    except InvalidTaskError as exc:
        print(f"Invalid task: {exc}", file=sys.stderr)
        return 2
    except OSError as exc:
        print(f"Failed to record task: {exc}", file=sys.stderr)
        return 1

    if args.verbose:
        for entry in result.appended:
            print(log_file.format_line(entry), end="")
    print(result.message)
    return 0 if result.recorded else 1


def _cmd_types(args: argparse.Namespace, settings: Settings) -> int:
    for task_type in recent_types(log_file.read_all(settings.log_path)):
        print(task_type)
    return 0


def _cmd_contents(args: argparse.Namespace, settings: Settings) -> int:
    for content in recent_contents(log_file.read_all(settings.log_path), args.type.strip()):
        print(content)
    return 0


def _cmd_last(args: argparse.Namespace, settings: Settings) -> int:
    entry = log_file.last_entry(settings.log_path)
    if entry is not None and entry.timestamp is not None:
        print(log_file.format_line(entry), end="")
    return 0


def _cmd_session(args: argparse.Namespace, settings: Settings) -> int:
    session = _history(settings).snapshot()
    print(f"login: {format_timestamp(session.login) if session.login else '-'}")
    print(f"logout: {format_timestamp(session.logout) if session.logout else '-'}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tasklog", description="Log what you are working on")
    parser.add_argument("--config", help="Path to a YAML config file")
    parser.add_argument("--log-file", help="Task log to use instead of the configured one")
    parser.add_argument("--verbose", "-v", action="store_true", help="Print appended lines and debug logs")
    sub = parser.add_subparsers(dest="command", required=True)

    record = sub.add_parser("record", help="Record a task, backfilling missed logins")
    record.add_argument("type", help="Task type, e.g. a project name")
    record.add_argument("content", nargs="*", help="What you are doing")
    record.set_defaults(handler=_cmd_record)

    types = sub.add_parser("types", help="List task types, most recent first")
    types.set_defaults(handler=_cmd_types)

    contents = sub.add_parser("contents", help="List contents used for a type, most recent first")
    contents.add_argument("type")
    contents.set_defaults(handler=_cmd_contents)

    last = sub.add_parser("last", help="Show the last logged entry")
    last.set_defaults(handler=_cmd_last)

    session = sub.add_parser("session", help="Show the detected login and logout times")
    session.set_defaults(handler=_cmd_session)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    try:
        settings = load_settings(args.config)
    except ValueError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2
    if args.log_file:
        settings.log_path = Path(args.log_file).expanduser()

    logger.debug("Using task log %s", settings.log_path)
    return args.handler(args, settings)


if __name__ == "__main__":
    sys.exit(main())
