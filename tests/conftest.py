import pytest


@pytest.fixture
def isolated_home(tmp_path, monkeypatch):
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("TASKLOG_FILE", raising=False)
    monkeypatch.delenv("TASKLOG_CONFIG", raising=False)
    return home
