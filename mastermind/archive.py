"""
Archive persistence for won games.

Public API (both backends):
- load() -> list[Game]        read the whole history (empty if nothing stored yet)
- save(history) -> None       write the whole history after every archive event

Errors are raised as ArchiveError; GameStore logs and ignores them,
because the in-memory history stays authoritative for the session.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Protocol, Sequence

from pydantic import TypeAdapter, ValidationError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from .config import Settings
from .db import make_engine, make_session_factory, create_all
from .errors import ArchiveError
from .models import ArchivedGame as ArchivedGameORM, ArchivedGuess as ArchivedGuessORM
from .schemas import ArchivedGameRecord, GuessEntryOut
from .store import Game, GuessEntry

logger = logging.getLogger(__name__)

_records = TypeAdapter(List[ArchivedGameRecord])


class HistoryArchive(Protocol):
    """Durable, ordered storage of archived games."""

    def load(self) -> List[Game]:
        ...

    def save(self, history: Sequence[Game]) -> None:
        ...

# --- Record <-> Game converters ---

def _to_record(game: Game) -> ArchivedGameRecord:
    return ArchivedGameRecord(
        id=game.id,
        secret=list(game.secret),
        guesses=[
            GuessEntryOut(guess=list(g.guess), black=g.black, white=g.white, timestamp=g.timestamp)
            for g in game.guesses
        ],
    )

def _from_record(record: ArchivedGameRecord) -> Game:
    return Game(
        id=record.id,
        secret=tuple(record.secret),
        guesses=[
            GuessEntry(guess=tuple(g.guess), black=g.black, white=g.white, timestamp=g.timestamp)
            for g in record.guesses
        ],
    )


class JsonHistoryArchive:
    """Whole history as one JSON array in a file (default: history.json)."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def load(self) -> List[Game]:
        if not self.path.exists():
            return []
        try:
            records = _records.validate_json(self.path.read_bytes())
        except (OSError, ValidationError) as exc:
            raise ArchiveError(f"Cannot read history from {self.path}: {exc}") from exc
        logger.debug("Loaded %d archived games from %s", len(records), self.path)
        return [_from_record(r) for r in records]

    def save(self, history: Sequence[Game]) -> None:
        data = _records.dump_json([_to_record(g) for g in history], indent=2)
        # write next to the target, then swap, so a crash never leaves half a file
        try:
            tmp = self.path.with_name(self.path.name + ".tmp")
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_bytes(data)
            tmp.replace(self.path)
        except (OSError, ValueError) as exc:
            # ValueError: the path has no file name (e.g. "" or ".")
            raise ArchiveError(f"Cannot write history to {self.path}: {exc}") from exc
        logger.debug("Saved %d archived games to %s", len(history), self.path)


class SqlHistoryArchive:
    """History in the archived_games / archived_guesses tables."""

    def __init__(self, session_factory: sessionmaker) -> None:
        self.session_factory = session_factory

    def load(self) -> List[Game]:
        try:
            with self.session_factory() as db:
                rows = db.execute(
                    select(ArchivedGameORM).order_by(ArchivedGameORM.position.asc())
                ).scalars().all()
                records = [
                    ArchivedGameRecord(
                        id=row.id,
                        secret=row.secret,
                        guesses=[
                            GuessEntryOut(guess=g.guess, black=g.black, white=g.white, timestamp=g.timestamp)
                            for g in row.guesses
                        ],
                    )
                    for row in rows
                ]
        except (SQLAlchemyError, ValidationError) as exc:
            raise ArchiveError(f"Cannot read history from database: {exc}") from exc
        games = [_from_record(r) for r in records]
        logger.debug("Loaded %d archived games from database", len(games))
        return games

    def save(self, history: Sequence[Game]) -> None:
        # History is append-only: rows already stored never change,
        # so writing the full list means inserting whatever is missing.
        try:
            with self.session_factory() as db:
                for position, game in enumerate(history):
                    if db.get(ArchivedGameORM, game.id) is not None:
                        continue
                    row = ArchivedGameORM(id=game.id, secret=list(game.secret), position=position)
                    row.guesses = [
                        ArchivedGuessORM(
                            seq=seq,
                            guess=list(g.guess),
                            black=g.black,
                            white=g.white,
                            timestamp=g.timestamp,
                        )
                        for seq, g in enumerate(game.guesses)
                    ]
                    db.add(row)
                db.commit()
        except SQLAlchemyError as exc:
            raise ArchiveError(f"Cannot write history to database: {exc}") from exc
        logger.debug("Saved %d archived games to database", len(history))


def build_archive(settings: Settings) -> HistoryArchive:
    """SQL archive when DATABASE_URL is set, JSON file otherwise."""
    if settings.archive_backend == "sql":
        try:
            engine = make_engine(settings.database_url)
        except (SQLAlchemyError, ImportError):
            # bad URL or missing DB driver: keep playing on the JSON file
            logger.warning(
                "Cannot use DATABASE_URL, falling back to %s", settings.history_file, exc_info=True
            )
            return JsonHistoryArchive(settings.history_file)
        # Dev convenience: auto-create tables locally
        if settings.app_env == "local":
            try:
                create_all(engine)
            except SQLAlchemyError:
                # load()/save() will fail too and be ignored; the session still runs
                logger.warning("Could not create archive tables", exc_info=True)
        return SqlHistoryArchive(make_session_factory(engine))
    return JsonHistoryArchive(settings.history_file)
