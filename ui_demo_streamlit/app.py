"""Streamlit shell for recording tasks."""

from __future__ import annotations

from typing import Any

from tasklog_engine.adapters import log_file
from tasklog_engine.adapters.session_history import SessionHistory
from tasklog_engine.config import Settings, load_settings
from tasklog_engine.reconcile import InvalidTaskError, record_task
from tasklog_engine.schema import format_timestamp
from tasklog_engine.suggestions import is_known, recent_contents, recent_types

NEW_OPTION = "+ Add new"


def _history(settings: Settings) -> SessionHistory:
    return SessionHistory(
        command=settings.session_command,
        terminal=settings.session_terminal,
        timeout=settings.command_timeout,
    )


def _build_summary(settings: Settings) -> dict[str, Any]:
    entries = log_file.read_all(settings.log_path)
    last = entries[-1] if entries else None
    return {
        "total_entries": len(entries),
        "types": recent_types(entries),
        "entries": entries,
        "last": last,
    }


def _pick(st, label: str, options: list[str], key: str) -> str:
    choice = st.selectbox(label, options=options + [NEW_OPTION], key=f"{key}_select")
    if choice == NEW_OPTION:
        typed = st.text_input(f"New {label.lower()}", key=f"{key}_input").strip()
        if typed and is_known(typed, options):
            st.caption(f"'{typed}' already exists and will be reused.")
        return typed
    return choice


def main() -> None:
    import streamlit as st

    st.set_page_config(page_title="Task Log", layout="centered")
    st.title("Task Log")

    try:
        settings = load_settings()
    except ValueError as exc:
        st.error(f"Configuration error: {exc}")
        return

    summary = _build_summary(settings)
    last = summary["last"]
    if last is not None and last.timestamp is not None:
        st.info(f"In course since {format_timestamp(last.timestamp)}: **{last.type}** {last.content}")

    task_type = _pick(st, "Type", summary["types"], key="type")
    contents = recent_contents(summary["entries"], task_type) if task_type else []
    content = _pick(st, "Content", contents, key="content")

    if not st.button("Record task", type="primary", disabled=not task_type):
        return

    try:
        result = record_task(task_type, content, settings.log_path, _history(settings))
    except InvalidTaskError as exc:
        st.error(f"Input error: {exc}")
        return
    except OSError as exc:
        st.error(f"Failed to record task: {exc}")
        return

    if result.recorded:
        st.success(result.message)
    else:
        st.error(result.message)
    if result.backfilled:
        st.caption("Added missing login/logout entries from the session history.")
    st.table([{"line": log_file.format_line(entry).rstrip("\n")} for entry in result.appended])


if __name__ == "__main__":
    main()
