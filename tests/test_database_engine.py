"""
tests/test_database_engine.py — Engine, session and async bridge helpers
=========================================================================
"""

from __future__ import annotations

import pytest
from conftest import run_async, seed_project, stored_level

from biodao.database.engine import create_db_engine, get_session, init_db, run_db
from biodao.database.models import Project


def test_missing_database_url(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    with pytest.raises(RuntimeError, match="DATABASE_URL"):
        create_db_engine()


def test_engine_from_env_and_init(tmp_path, monkeypatch):
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'biodao.db'}")
    engine = create_db_engine()
    init_db(engine)
    seed_project(engine, level=1)
    assert stored_level(engine) == 1


def test_session_rolls_back_on_error(db_engine):
    seed_project(db_engine, level=2)
    with pytest.raises(RuntimeError):
        with get_session(db_engine) as session:
            session.get(Project, "proj-1").level = 3
            raise RuntimeError("abort")
    assert stored_level(db_engine) == 2


def test_run_db_forwards_args(db_engine):
    seed_project(db_engine, level=2)

    def _level(engine, project_id, *, bump=0):
        with get_session(engine) as session:
            return session.get(Project, project_id).level + bump

    assert run_async(run_db(_level, db_engine, "proj-1", bump=1)) == 3
