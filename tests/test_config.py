"""
Testing settings read from the environment.
"""

import pytest

from mastermind.config import DEFAULT_API_TIMEOUT, get_settings


@pytest.fixture
def clean_env(monkeypatch):
    for name in ("MASTERMIND_HISTORY_FILE", "DATABASE_URL", "MASTERMIND_API_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch

def test_defaults(clean_env):
    settings = get_settings()
    assert settings.history_file == "history.json"
    assert settings.api_timeout == DEFAULT_API_TIMEOUT
    assert settings.archive_backend == "json"

def test_timeout_is_read(clean_env):
    clean_env.setenv("MASTERMIND_API_TIMEOUT", "2.5")
    assert get_settings().api_timeout == 2.5

@pytest.mark.parametrize("raw", ["abc", "", "0", "-3", "nan"])
def test_bad_timeout_falls_back_to_default(clean_env, raw):
    clean_env.setenv("MASTERMIND_API_TIMEOUT", raw)
    assert get_settings().api_timeout == DEFAULT_API_TIMEOUT

def test_empty_history_file_uses_default(clean_env):
    clean_env.setenv("MASTERMIND_HISTORY_FILE", "")
    assert get_settings().history_file == "history.json"

def test_database_url_selects_sql(clean_env):
    clean_env.setenv("DATABASE_URL", "sqlite+pysqlite:///:memory:")
    assert get_settings().archive_backend == "sql"
