"""
Line-oriented command interpreter (the "API-like terminal").

Each input line is trimmed; empty lines are skipped; the first token (case-insensitive)
picks the command and the rest are its arguments. Every result is written as one
pretty-printed JSON object, except `help` which prints plain text.

Commands:
game                 -> start a game and make it active
guess <1234>         -> score a guess against the active game
delete <game_id>     -> drop an in-progress game (not archived)
list                 -> in-progress games + the active one
switch <game_id>     -> make another game active
history [game_id]    -> archived ids, or one archived game's guess trace
help / exit
"""

import sys
from typing import Callable, Dict, Optional, TextIO, Tuple

from pydantic import BaseModel

from .engine import parse_code, is_win
from .store import Game, GameStore
from .schemas import (
    GameStartResponse,
    GuessResponse,
    MessageResponse,
    ErrorResponse,
    GameListResponse,
    HistoryResponse,
    GameTraceResponse,
    GuessEntryOut,
)

HELP_TEXT = """\
Commands:
  game
    Start a new game -> JSON output with game_id
  guess <1234>
    Make a guess in the active game -> JSON output with black/white
  delete <game_id>
    Delete a game -> JSON output with message or error
  list
    List all active games and highlight the current active one
  switch <game_id>
    Switch to a different active game
  history
    Show archived games by their IDs
  history <game_id>
    Show the secret and every guess of an archived game
  help
    Show this help
  exit
    Exit

Notes:
  - Each guess digit must be between 1..6, and exactly 4 digits long.
  - Run with --debug to see the secret code on STDERR."""

NOT_FOUND = "Game not found"
NO_ACTIVE_GAME = "No active game. Create one with 'game'."
UNKNOWN_COMMAND = "Unknown command. Type 'help'."

# command -> (allowed argument counts, usage message)
COMMANDS: Dict[str, Tuple[Tuple[int, ...], str]] = {
    "game": ((0,), "Usage: game"),
    "guess": ((1,), "Usage: guess <4 digits between 1..6>"),
    "delete": ((1,), "Usage: delete <game_id>"),
    "list": ((0,), "Usage: list"),
    "switch": ((1,), "Usage: switch <game_id>"),
    "history": ((0, 1), "Usage: history [game_id]"),
    "help": ((0,), "Usage: help"),
    "exit": ((0,), "Usage: exit"),
}


def congratulations(game_id: str) -> str:
    return f"Congratulations! You guessed the secret code for game {game_id}!"


def trace_response(game: Game) -> GameTraceResponse:
    return GameTraceResponse(
        game_id=game.id,
        secret=list(game.secret),
        guesses=[
            GuessEntryOut(guess=list(g.guess), black=g.black, white=g.white, timestamp=g.timestamp)
            for g in game.guesses
        ],
    )


class Interpreter:
    """
    The read-evaluate-print loop and command dispatch.
    Subclasses supply cmd_<name> handlers for the game commands.
    """

    banner = "Mastermind - API-like terminal\nType 'help' for commands. Type 'exit' to quit."

    def __init__(self, out: Optional[TextIO] = None) -> None:
        self.out = out if out is not None else sys.stdout
        self.running = True

    # --- Output ---

    def emit(self, payload: BaseModel) -> None:
        self.out.write(payload.model_dump_json(indent=2) + "\n")
        self.out.flush()

    def error(self, message: str) -> None:
        self.emit(ErrorResponse(error=message))

    # --- Loop ---

    def handle_line(self, line: str) -> bool:
        """Process one input line. Returns False once the session is terminated."""
        trimmed = line.strip()
        if not trimmed:
            return self.running

        tokens = trimmed.split()
        name = tokens[0].lower()
        args = tokens[1:]

        entry = COMMANDS.get(name)
        if entry is None:
            self.error(UNKNOWN_COMMAND)
            return self.running

        arities, usage = entry
        if len(args) not in arities:
            self.error(usage)
            return self.running

        handler: Callable[..., None] = getattr(self, f"cmd_{name}")
        handler(*args)
        return self.running

    def run(self, stream: TextIO, interactive: bool = False) -> None:
        """Read lines until `exit` or end of input."""
        if interactive:
            self.out.write(self.banner + "\n")
        while self.running:
            if interactive:
                self.out.write("\n> ")
                self.out.flush()
            line = stream.readline()
            if line == "":
                break
            self.handle_line(line)

    # --- Commands that never touch game state ---

    def cmd_help(self) -> None:
        self.out.write(HELP_TEXT + "\n")

    def cmd_exit(self) -> None:
        self.running = False


class CommandInterpreter(Interpreter):
    """Offline interpreter: all commands run against a local GameStore."""

    def __init__(self, store: GameStore, out: Optional[TextIO] = None) -> None:
        super().__init__(out)
        self.store = store

    def cmd_game(self) -> None:
        game = self.store.create_game()
        self.emit(GameStartResponse(game_id=game.id))

    def cmd_guess(self, text: str) -> None:
        # validate first: a malformed guess never reaches the evaluator
        try:
            code = parse_code(text)
        except ValueError as ve:
            self.error(str(ve))
            return

        game = self.store.get_active_game()
        if game is None:
            self.error(NO_ACTIVE_GAME)
            return

        entry = self.store.record_guess(game.id, code)
        if entry is None:
            self.error(NOT_FOUND)
            return
        self.emit(GuessResponse(black=entry.black, white=entry.white))

        if is_win(game.secret, code):
            self.emit(MessageResponse(message=congratulations(game.id)))
            self.store.archive_and_delete(game)

    def cmd_delete(self, game_id: str) -> None:
        if self.store.delete_game(game_id):
            self.emit(MessageResponse(message="Game deleted"))
        else:
            self.error(NOT_FOUND)

    def cmd_list(self) -> None:
        listing = self.store.list_games()
        self.emit(GameListResponse(active=listing.active, games=listing.games))

    def cmd_switch(self, game_id: str) -> None:
        if self.store.switch_game(game_id):
            self.emit(MessageResponse(message=f"Switched to game {game_id}"))
        else:
            self.error(NOT_FOUND)

    def cmd_history(self, game_id: Optional[str] = None) -> None:
        if game_id is None:
            self.emit(HistoryResponse(history=self.store.history_ids()))
            return

        game = self.store.get_archived(game_id)
        if game is None:
            self.error(NOT_FOUND)
            return
        self.emit(trace_response(game))
