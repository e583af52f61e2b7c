"""
SQLAlchemy ORM models for the SQL history archive.

Tables:
- archived_games: one row per won game (secret stored as JSON)
- archived_guesses: one row per guess of an archived game (the trace)

Why JSON?
- Secret and guesses are small arrays of ints; JSON is simple & clear.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import String, Integer, Float, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .db import Base

class ArchivedGame(Base):
    __tablename__ = "archived_games"

    # UUIDs generated in code; stored as strings
    id: Mapped[str] = mapped_column(String(36), primary_key=True)

    # Secret code (list[int], digits 1..6)
    secret: Mapped[list[int]] = mapped_column(JSON, nullable=False)

    # History is append-only, so this also gives the archive order
    position: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    archived_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)

    guesses: Mapped[list["ArchivedGuess"]] = relationship(
        back_populates="game",
        cascade="all, delete-orphan",
        order_by="ArchivedGuess.seq.asc()",
    )

class ArchivedGuess(Base):
    __tablename__ = "archived_guesses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    game_id: Mapped[str] = mapped_column(String(36), ForeignKey("archived_games.id", ondelete="CASCADE"), index=True)
    game: Mapped[ArchivedGame] = relationship(back_populates="guesses")

    # Order inside the game's trace
    seq: Mapped[int] = mapped_column(Integer, nullable=False)

    guess: Mapped[list[int]] = mapped_column(JSON, nullable=False)
    black: Mapped[int] = mapped_column(Integer, nullable=False)
    white: Mapped[int] = mapped_column(Integer, nullable=False)

    # Epoch seconds, same as the in-memory GuessEntry
    timestamp: Mapped[float] = mapped_column(Float, nullable=False)
