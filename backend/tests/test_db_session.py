"""Tests for engine option selection."""

from stayhub.db.session import engine_options


def test_sqlite_allows_cross_thread_use():
    assert engine_options("sqlite://") == {"connect_args": {"check_same_thread": False}}
    assert engine_options("sqlite:///./stayhub.db") == {"connect_args": {"check_same_thread": False}}


def test_postgres_pings_pooled_connections():
    assert engine_options("postgresql+psycopg2://u:p@localhost/stayhub") == {"pool_pre_ping": True}
