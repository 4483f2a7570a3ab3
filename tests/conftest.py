"""
tests/conftest.py — Shared Test Fixtures
=========================================
"""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from biodao.database.models import Base, Discord, Project


def run_async(coro):
    """Run a coroutine to completion on a fresh event loop."""
    return asyncio.run(coro)


@pytest.fixture
def db_engine() -> Engine:
    """In-memory SQLite engine with all BioDAO tables.

    StaticPool lets every thread share the same in-memory database, which
    ``run_db`` (``asyncio.to_thread``) needs.
    """
    engine = create_engine(
        "sqlite://",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return engine


@pytest.fixture
def notifier() -> MagicMock:
    """A Notifier whose sends are recorded instead of delivered."""
    n = MagicMock()
    n.send_level_up_notice = AsyncMock()
    n.send_terminal_tier_notice = AsyncMock()
    return n


def seed_project(
    engine: Engine,
    project_id: str = "proj-1",
    *,
    level: int = 2,
    email: str | None = "founder@example.org",
    discord: dict | None = None,
) -> None:
    """Insert a project (and optionally its Discord row)."""
    with Session(engine) as session:
        project = Project(id=project_id, name=f"Project {project_id}", level=level, email=email)
        session.add(project)
        if discord is not None:
            session.add(Discord(project_id=project_id, **discord))
        session.commit()


def stored_level(engine: Engine, project_id: str = "proj-1") -> int:
    with Session(engine) as session:
        return session.get(Project, project_id).level


@pytest.fixture
def client(db_engine, notifier):
    """FastAPI TestClient wired to the SQLite engine and a mock notifier."""
    from fastapi.testclient import TestClient

    from biodao.api.deps import get_config, get_engine, get_notifier
    from biodao.api.main import app
    from biodao.config import BioDAOConfig

    app.dependency_overrides[get_engine] = lambda: db_engine
    app.dependency_overrides[get_notifier] = lambda: notifier
    app.dependency_overrides[get_config] = lambda: BioDAOConfig(discord_client_id="42")
    try:
        yield TestClient(app, raise_server_exceptions=False)
    finally:
        app.dependency_overrides.clear()
