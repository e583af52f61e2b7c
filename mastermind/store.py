"""
In-memory store
Holds the in-progress games, the active game pointer and the archive of won games.
The archive collaborator is only used for durability; memory is authoritative.
"""

import logging
import sys
import random
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Dict, List, Optional, TextIO
from uuid import uuid4
from time import time
from threading import RLock

from .types import Code
from .engine import evaluate, format_code
from .generator import generate_code
from .errors import ArchiveError

if TYPE_CHECKING:
    from .archive import HistoryArchive

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class GuessEntry:
    guess: Code
    black: int
    white: int
    timestamp: float = field(default_factory=time)

@dataclass
class Game:
    id: str
    secret: Code
    # guess trace, kept so archived games can be replayed with `history <id>`
    guesses: List[GuessEntry] = field(default_factory=list)
    created_at: float = field(default_factory=time)

@dataclass
class GameListing:
    active: Optional[str]
    games: List[str]


def _snapshot(game: Game) -> Game:
    # archived games are read-only: hand out (and keep) copies with their own trace list
    return replace(game, guesses=list(game.guesses))


class GameStore:
    def __init__(
        self,
        archive: Optional["HistoryArchive"] = None,
        debug: bool = False,
        diagnostics: Optional[TextIO] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._games: Dict[str, Game] = {}
        self._active: Optional[str] = None
        self._lock = RLock()
        self._archive = archive
        self._debug = debug
        self._diagnostics = diagnostics
        self._rng = rng
        self._history: List[Game] = self._load_history()

    # --- Archive helpers (best effort) ---

    def _load_history(self) -> List[Game]:
        if self._archive is None:
            return []
        try:
            return list(self._archive.load())
        except ArchiveError:
            # a broken archive must not keep the program from starting
            logger.warning("Could not load game history; starting empty", exc_info=True)
            return []

    def _save_history(self) -> None:
        if self._archive is None:
            return
        try:
            self._archive.save(list(self._history))
        except ArchiveError:
            logger.warning("Could not persist game history", exc_info=True)

    def _emit_secret(self, game: Game) -> None:
        if not self._debug:
            return
        stream = self._diagnostics if self._diagnostics is not None else sys.stderr
        stream.write(f"[DEBUG] secret({game.id}) = {format_code(game.secret)}\n")
        stream.flush()

    # --- Public API ---

    @property
    def active(self) -> Optional[str]:
        return self._active

    @property
    def history(self) -> List[Game]:
        with self._lock:
            return [_snapshot(g) for g in self._history]

    def create_game(self, activate: bool = True) -> Game:
        game = Game(id=str(uuid4()), secret=generate_code(self._rng))
        with self._lock:
            self._games[game.id] = game
            if activate:
                self._active = game.id
        self._emit_secret(game)
        return game

    def get_game(self, game_id: str) -> Optional[Game]:
        with self._lock:
            return self._games.get(game_id)

    def get_active_game(self) -> Optional[Game]:
        with self._lock:
            if self._active is None:
                return None
            return self._games.get(self._active)

    def record_guess(self, game_id: str, guess: Code) -> Optional[GuessEntry]:
        """
        Score a (validated) guess against the game's secret and add it to the trace.
        Returns None when the game is not in progress.
        Archiving a win is left to the caller (see archive_and_delete).
        """
        with self._lock:
            game = self._games.get(game_id)
            if game is None:
                return None
            black, white = evaluate(game.secret, guess)
            entry = GuessEntry(guess=tuple(guess), black=black, white=white)
            game.guesses.append(entry)
            return entry

    def delete_game(self, game_id: str) -> bool:
        with self._lock:
            removed = self._games.pop(game_id, None) is not None
            if self._active == game_id:
                self._active = None
            return removed

    def archive_and_delete(self, game: Game) -> None:
        with self._lock:
            # only in-progress games can be archived, and only once
            if game.id not in self._games:
                return
            self._history.append(_snapshot(game))
            self._save_history()
            self.delete_game(game.id)

    def list_games(self) -> GameListing:
        with self._lock:
            return GameListing(active=self._active, games=list(self._games.keys()))

    def switch_game(self, game_id: str) -> bool:
        with self._lock:
            if game_id not in self._games:
                return False
            self._active = game_id
            return True

    def history_ids(self) -> List[str]:
        with self._lock:
            return [g.id for g in self._history]

    def get_archived(self, game_id: str) -> Optional[Game]:
        with self._lock:
            for game in self._history:
                if game.id == game_id:
                    return _snapshot(game)
            return None
