"""
Single place to:
- Create a SQLAlchemy Engine for the archive database (DATABASE_URL)
- Create a Session factory for the SQL history archive
- Create the tables in local/dev runs

Only used when DATABASE_URL is configured; otherwise history lives in a JSON file.
"""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase


# Base class for ORM models.
class Base(DeclarativeBase):
    pass


def make_engine(database_url: str) -> Engine:
    # pool_pre_ping=True = auto-detect dead connections (helps with long-lived processes).
    return create_engine(
        database_url,
        pool_pre_ping=True,
        echo=False,
        future=True,
    )


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


def create_all(engine: Engine) -> None:
    """Dev convenience: create tables if they don't exist."""
    # models must be imported so their tables are registered on Base.metadata
    from . import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
