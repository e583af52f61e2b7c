"""
Testing the entry points with a fake stdin.
"""

import io
import json

import pytest

from mastermind import cli

@pytest.fixture
def history_file(tmp_path, monkeypatch):
    path = tmp_path / "history.json"
    monkeypatch.setenv("MASTERMIND_HISTORY_FILE", str(path))
    monkeypatch.delenv("DATABASE_URL", raising=False)
    return path

def test_main_runs_commands_until_exit(history_file, fixed_secret, monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("game\nguess 1234\nhistory\nexit\n"))

    assert cli.main([]) == 0

    captured = capsys.readouterr()
    assert '"black": 4' in captured.out
    assert captured.err == ""
    assert len(json.loads(history_file.read_text())) == 1

def test_main_debug_prints_secret_to_stderr(history_file, fixed_secret, monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("game\n"))

    assert cli.main(["--debug"]) == 0

    captured = capsys.readouterr()
    assert "[DEBUG] secret(" in captured.err
    assert ") = 1234" in captured.err
    assert "1234" not in captured.out.replace(json.loads(captured.out)["game_id"], "")

def test_main_rejects_unknown_flags(history_file):
    with pytest.raises(SystemExit):
        cli.main(["--verbose"])

def test_online_main_local_commands_need_no_service(monkeypatch, capsys):
    # help/exit and guess validation never hit the network
    monkeypatch.setattr("sys.stdin", io.StringIO("help\nguess 99\nexit\n"))

    assert cli.online_main(["--url", "http://127.0.0.1:9"]) == 0

    captured = capsys.readouterr()
    assert "Commands:" in captured.out
    assert "Guess must be 4 digits" in captured.out
