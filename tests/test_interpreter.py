"""
Testing the command interpreter end to end
- Feed lines in, parse the JSON objects that come out.
- Secret is pinned to 1234 by the fixed_secret fixture.
"""

import io
import json

import pytest

from mastermind.interpreter import HELP_TEXT

def read_objects(out: io.StringIO):
    """Split the output buffer into the JSON objects written so far."""
    decoder = json.JSONDecoder()
    text = out.getvalue()
    objects = []
    idx = 0
    while idx < len(text):
        if text[idx].isspace():
            idx += 1
            continue
        obj, idx = decoder.raw_decode(text, idx)
        objects.append(obj)
    out.seek(0)
    out.truncate()
    return objects

def send(interpreter, out, line):
    interpreter.handle_line(line)
    return read_objects(out)

def test_game_returns_id_and_activates(interpreter, out, store):
    [started] = send(interpreter, out, "game")
    assert set(started) == {"game_id"}
    assert store.active == started["game_id"]

    [listing] = send(interpreter, out, "list")
    assert listing == {"active": started["game_id"], "games": [started["game_id"]]}

def test_sequential_scenario(interpreter, out):
    # game -> G1 active
    [started] = send(interpreter, out, "game")
    g1 = started["game_id"]

    # guess 1111 against 1234 -> one black, still in progress
    [result] = send(interpreter, out, "guess 1111")
    assert result == {"black": 1, "white": 0}
    [listing] = send(interpreter, out, "list")
    assert listing["active"] == g1

    # switch to the already active game
    [switched] = send(interpreter, out, f"switch {g1}")
    assert switched == {"message": f"Switched to game {g1}"}

    # delete -> nothing left
    [deleted] = send(interpreter, out, f"delete {g1}")
    assert deleted == {"message": "Game deleted"}
    [listing] = send(interpreter, out, "list")
    assert listing == {"active": None, "games": []}

def test_winning_guess_archives_game(interpreter, out, archive):
    [started] = send(interpreter, out, "game")
    gid = started["game_id"]

    result, congrats = send(interpreter, out, "guess 1234")
    assert result == {"black": 4, "white": 0}
    assert gid in congrats["message"]

    [listing] = send(interpreter, out, "list")
    assert listing == {"active": None, "games": []}

    [history] = send(interpreter, out, "history")
    assert history == {"history": [gid]}

    assert [g.id for g in archive.load()] == [gid]

def test_history_of_archived_game_shows_trace(interpreter, out):
    [started] = send(interpreter, out, "game")
    gid = started["game_id"]
    send(interpreter, out, "guess 4321")
    send(interpreter, out, "guess 1234")

    [trace] = send(interpreter, out, f"history {gid}")
    assert trace["game_id"] == gid
    assert trace["secret"] == [1, 2, 3, 4]
    assert [(g["guess"], g["black"], g["white"]) for g in trace["guesses"]] == [
        ([4, 3, 2, 1], 0, 4),
        ([1, 2, 3, 4], 4, 0),
    ]

def test_history_of_unknown_or_unfinished_game(interpreter, out):
    [started] = send(interpreter, out, "game")
    # still in progress, so not in the archive
    assert send(interpreter, out, f"history {started['game_id']}") == [{"error": "Game not found"}]
    assert send(interpreter, out, "history nope") == [{"error": "Game not found"}]

def test_guess_without_active_game(interpreter, out):
    assert send(interpreter, out, "guess 1234") == [
        {"error": "No active game. Create one with 'game'."}
    ]

@pytest.mark.parametrize("bad", ["12a4", "12345", "000", "789"])
def test_malformed_guess_rejected(interpreter, out, store, bad):
    send(interpreter, out, "game")
    game = store.get_active_game()

    [response] = send(interpreter, out, f"guess {bad}")
    assert response == {"error": "Guess must be 4 digits, each in 1..6"}
    # never reached the evaluator
    assert game.guesses == []

def test_malformed_guess_reported_before_missing_game(interpreter, out):
    [response] = send(interpreter, out, "guess 99")
    assert response["error"].startswith("Guess must be")

def test_delete_unknown_leaves_list_unchanged(interpreter, out):
    send(interpreter, out, "game")
    [before] = send(interpreter, out, "list")
    assert send(interpreter, out, "delete missing") == [{"error": "Game not found"}]
    [after] = send(interpreter, out, "list")
    assert after == before

def test_switch_unknown_keeps_active(interpreter, out):
    [started] = send(interpreter, out, "game")
    assert send(interpreter, out, "switch missing") == [{"error": "Game not found"}]
    [listing] = send(interpreter, out, "list")
    assert listing["active"] == started["game_id"]

def test_switch_between_games(interpreter, out):
    [first] = send(interpreter, out, "game")
    [second] = send(interpreter, out, "game")
    [listing] = send(interpreter, out, "list")
    assert listing["active"] == second["game_id"]

    send(interpreter, out, f"switch {first['game_id']}")
    [listing] = send(interpreter, out, "list")
    assert listing["active"] == first["game_id"]
    assert sorted(listing["games"]) == sorted([first["game_id"], second["game_id"]])

@pytest.mark.parametrize("line, usage", [
    ("guess", "Usage: guess <4 digits between 1..6>"),
    ("guess 1234 5555", "Usage: guess <4 digits between 1..6>"),
    ("delete", "Usage: delete <game_id>"),
    ("switch", "Usage: switch <game_id>"),
    ("switch a b", "Usage: switch <game_id>"),
    ("history a b", "Usage: history [game_id]"),
    ("list all", "Usage: list"),
])
def test_wrong_argument_count(interpreter, out, line, usage):
    assert send(interpreter, out, line) == [{"error": usage}]

def test_unknown_command(interpreter, out):
    assert send(interpreter, out, "dance") == [{"error": "Unknown command. Type 'help'."}]

def test_commands_are_case_insensitive(interpreter, out):
    [started] = send(interpreter, out, "  GAME  ")
    assert "game_id" in started
    assert send(interpreter, out, "Guess 1111") == [{"black": 1, "white": 0}]

def test_empty_lines_are_ignored(interpreter, out):
    assert interpreter.handle_line("") is True
    assert interpreter.handle_line("   \t") is True
    assert out.getvalue() == ""

def test_help_prints_text(interpreter, out):
    interpreter.handle_line("help")
    assert out.getvalue() == HELP_TEXT + "\n"

def test_exit_stops_run(interpreter, out):
    stream = io.StringIO("game\nexit\ngame\n")
    interpreter.run(stream)
    objects = read_objects(out)
    # the second `game` is never read
    assert len(objects) == 1
    assert interpreter.running is False

def test_run_stops_at_end_of_input(interpreter, out, store):
    interpreter.run(io.StringIO("game\n\nguess 1111\n"))
    objects = read_objects(out)
    assert objects[1] == {"black": 1, "white": 0}
    assert interpreter.running is True
    assert len(store.list_games().games) == 1

def test_interactive_run_shows_banner_and_prompt(interpreter, out):
    interpreter.run(io.StringIO("exit\n"), interactive=True)
    text = out.getvalue()
    assert text.startswith("Mastermind")
    assert "\n> " in text

def test_debug_secret_never_on_stdout(tmp_path, fixed_secret, out):
    from mastermind.store import GameStore
    from mastermind.interpreter import CommandInterpreter

    diagnostics = io.StringIO()
    store = GameStore(debug=True, diagnostics=diagnostics)
    CommandInterpreter(store, out=out).handle_line("game")

    assert "1234" in diagnostics.getvalue()
    [started] = read_objects(out)
    assert set(started) == {"game_id"}
