from datetime import datetime, timezone

from tasklog_engine import cli
from tasklog_engine.schema import SessionEvent


class FakeHistory:
    def __init__(self, login=None, logout=None):
        self.event = SessionEvent(login=login, logout=logout)

    def snapshot(self) -> SessionEvent:
        return self.event


def _use_history(monkeypatch, history):
    monkeypatch.setattr(cli, "_history", lambda settings: history)


def test_record_then_duplicate(isolated_home, tmp_path, monkeypatch, capsys):
    _use_history(monkeypatch, FakeHistory())
    log = tmp_path / ".tasks"

    assert cli.main(["--log-file", str(log), "record", "writing", "quarterly", "report"]) == 0
    assert capsys.readouterr().out.strip() == "Task added"

    assert cli.main(["--log-file", str(log), "record", "writing", "quarterly", "report"]) == 1
    assert capsys.readouterr().out.strip() == "Task already in course"
    assert log.read_text(encoding="utf-8").count("\n") == 1
    assert log.read_text(encoding="utf-8").endswith(",writing,quarterly report\n")


def test_record_verbose_prints_backfill(isolated_home, tmp_path, monkeypatch, capsys):
    login = datetime(2024, 1, 10, 9, 0, tzinfo=timezone.utc)
    logout = datetime(2024, 1, 9, 17, 0, tzinfo=timezone.utc)
    _use_history(monkeypatch, FakeHistory(login=login, logout=logout))
    log = tmp_path / ".tasks"

    assert cli.main(["-v", "--log-file", str(log), "record", "writing", "report"]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out[0] == "2024-01-09T17:00:00+00:00,logout,"
    assert out[1] == "2024-01-10T09:00:00+00:00,login,"
    assert out[2].endswith(",writing,report")
    assert out[3] == "Task added"


def test_record_rejects_comma(isolated_home, tmp_path, monkeypatch, capsys):
    _use_history(monkeypatch, FakeHistory())
    log = tmp_path / ".tasks"

    assert cli.main(["--log-file", str(log), "record", "writing", "a,b"]) == 2
    assert "comma" in capsys.readouterr().err
    assert not log.exists()


def test_record_write_failure(isolated_home, tmp_path, monkeypatch, capsys):
    _use_history(monkeypatch, FakeHistory())
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("", encoding="utf-8")

    assert cli.main(["--log-file", str(blocker / ".tasks"), "record", "writing"]) == 1
    assert capsys.readouterr().err.startswith("Failed to record task:")


def test_types_contents_and_last(isolated_home, tmp_path, capsys):
    log = tmp_path / ".tasks"
    log.write_text(
        "2024-01-08T09:00:00+00:00,login,\n"
        "2024-01-08T09:01:00+00:00,writing,report\n"
        "2024-01-08T10:00:00+00:00,review,pr\n"
        "2024-01-08T11:00:00+00:00,writing,slides\n",
        encoding="utf-8",
    )

    assert cli.main(["--log-file", str(log), "types"]) == 0
    assert capsys.readouterr().out.splitlines() == ["writing", "review"]

    assert cli.main(["--log-file", str(log), "contents", "writing"]) == 0
    assert capsys.readouterr().out.splitlines() == ["slides", "report"]

    assert cli.main(["--log-file", str(log), "last"]) == 0
    assert capsys.readouterr().out == "2024-01-08T11:00:00+00:00,writing,slides\n"


def test_session_command(isolated_home, monkeypatch, capsys):
    _use_history(monkeypatch, FakeHistory(login=datetime(2024, 1, 10, 9, 0, tzinfo=timezone.utc)))

    assert cli.main(["session"]) == 0
    assert capsys.readouterr().out.splitlines() == ["login: 2024-01-10T09:00:00+00:00", "logout: -"]


def test_bad_config_exits(isolated_home, tmp_path, capsys):
    config = tmp_path / "tasklog.yaml"
    config.write_text("colour: blue\n", encoding="utf-8")

    assert cli.main(["--config", str(config), "types"]) == 2
    assert "colour" in capsys.readouterr().err


def test_record_boundary_with_content_is_rejected(isolated_home, tmp_path, monkeypatch, capsys):
    _use_history(monkeypatch, FakeHistory())
    log = tmp_path / ".tasks"

    assert cli.main(["--log-file", str(log), "record", "login", "foo"]) == 2
    assert "takes no content" in capsys.readouterr().err
    assert not log.exists()

    assert cli.main(["--log-file", str(log), "record", "login"]) == 0
    assert log.read_text(encoding="utf-8").endswith(",login,\n")
