"""Demo script for tasklog-engine."""

import sys
import tempfile
from datetime import datetime
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from tasklog_engine.adapters import log_file
from tasklog_engine.reconcile import record_task
from tasklog_engine.schema import SessionEvent


class StaticHistory:
    def __init__(self, login, logout):
        self.event = SessionEvent(login=login, logout=logout)

    def snapshot(self) -> SessionEvent:
        return self.event


def main() -> None:
    history = StaticHistory(
        login=datetime.fromisoformat("2024-01-10T09:00:00").astimezone(),
        logout=datetime.fromisoformat("2024-01-09T17:00:00").astimezone(),
    )
    with tempfile.TemporaryDirectory() as tmp:
        log_path = Path(tmp) / ".tasks"
        for task_type, content in [("writing", "report"), ("writing", "report"), ("review", "pull request")]:
            result = record_task(task_type, content, log_path, history)
            print(f"{task_type},{content}:", result.message)
        print("Log:")
        for entry in log_file.read_all(log_path):
            print(" ", log_file.format_line(entry), end="")


if __name__ == "__main__":
    main()
