"""Tests for engine and session setup."""

import pytest
from sqlalchemy import text

import database


@pytest.fixture
def memory_engine(monkeypatch):
    monkeypatch.setattr(database.settings, "DATABASE_URL", "sqlite:///:memory:")
    database.get_engine.cache_clear()
    yield database.get_engine()
    database.get_engine.cache_clear()


def test_sqlite_foreign_keys_enabled(memory_engine):
    with memory_engine.connect() as conn:
        assert conn.execute(text("PRAGMA foreign_keys")).scalar() == 1


def test_engine_is_cached(memory_engine):
    assert database.get_engine() is memory_engine


def test_get_db_rolls_back_on_error(memory_engine):
    gen = database.get_db()
    session = next(gen)
    with pytest.raises(RuntimeError):
        gen.throw(RuntimeError("boom"))
    assert not session.in_transaction()
