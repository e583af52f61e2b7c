"""
- Pins secrets so tests know the outcome of every guess
- Provides a store backed by a temp JSON archive, and an interpreter writing to a buffer
- Provides a client fixture (TestClient(app)) whose routes use a fresh store
- Provides an in-memory SQLite session factory for the SQL archive
"""
import io
import os
import pytest
from typing import Generator

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Ensure nothing tries to create tables against a real database
os.environ.setdefault("APP_ENV", "test")

import mastermind.store as store_module
from mastermind.archive import JsonHistoryArchive
from mastermind.db import Base
from mastermind.interpreter import CommandInterpreter
from mastermind.main import app, get_store
from mastermind.store import GameStore
from mastermind import models  # noqa: F401  (registers tables)

SECRET = (1, 2, 3, 4)

# Use SQLite in-memory for the SQL archive (fast, isolated)
TEST_DATABASE_URL = "sqlite+pysqlite:///:memory:"


def make_fake_generate_code(*secrets):
    """
    Returns a function that ignores randomness and hands out the given secrets
    in order (the last one repeats).
    """
    queue = list(secrets) or [SECRET]

    def fake_generate_code(rng=None):
        if len(queue) > 1:
            return queue.pop(0)
        return queue[0]
    return fake_generate_code


@pytest.fixture
def fixed_secret(monkeypatch):
    # Patch the bound symbol that store.py actually uses
    monkeypatch.setattr(store_module, "generate_code", make_fake_generate_code(SECRET))
    return SECRET


@pytest.fixture
def archive(tmp_path) -> JsonHistoryArchive:
    return JsonHistoryArchive(tmp_path / "history.json")


@pytest.fixture
def store(archive, fixed_secret) -> GameStore:
    return GameStore(archive=archive)


@pytest.fixture
def out() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def interpreter(store, out) -> CommandInterpreter:
    return CommandInterpreter(store, out=out)


@pytest.fixture
def server_store(tmp_path, fixed_secret) -> GameStore:
    return GameStore(archive=JsonHistoryArchive(tmp_path / "server_history.json"))


@pytest.fixture
def client(server_store) -> Generator:
    # Every request uses our temp-file store instead of the process-wide one
    app.dependency_overrides[get_store] = lambda: server_store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def session_factory() -> Generator:
    # StaticPool + check_same_thread=False share ONE in-memory SQLite database
    # across connections; otherwise each connection would see an empty DB.
    engine = create_engine(
        TEST_DATABASE_URL,
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    Base.metadata.drop_all(bind=engine)
    engine.dispose()
