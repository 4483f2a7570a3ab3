"""
biodao.database.engine — Engine, Sessions & the Async Bridge
=============================================================

The API handlers are coroutines; the storage functions in
:mod:`biodao.services.project_service` are plain sync SQLAlchemy.  Handlers
never call them directly; they go through :func:`run_db`::

    engine = create_db_engine()
    init_db(engine)

    snapshot = await run_db(load_project_snapshot, engine, project_id)
    changed = await run_db(update_project_level, engine, project_id, 2, 3)
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import ParamSpec, TypeVar

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session

from biodao.database.models import Base

logger = logging.getLogger(__name__)

P = ParamSpec("P")
T = TypeVar("T")

# Level checks and bot-status lookups are single-row reads/writes, so a
# small pool is plenty for one API process.
POOL_OPTIONS = {
    "pool_size": 3,
    "max_overflow": 5,
    "pool_pre_ping": True,
    "pool_recycle": 1800,
}


def create_db_engine(url: str | None = None) -> Engine:
    """Engine for *url*, falling back to the ``DATABASE_URL`` env var.

    Raises
    ------
    RuntimeError
        If neither is set.
    """
    url = url or os.getenv("DATABASE_URL")
    if not url:
        raise RuntimeError(
            "DATABASE_URL is not set.  "
            "Copy .env.example → .env and point it at the projects database."
        )

    engine = create_engine(url, **POOL_OPTIONS)
    logger.info("Database engine created → %s", engine.url.host)
    return engine


def init_db(engine: Engine) -> None:
    """Create the ``projects`` and ``discord`` tables if they are missing."""
    Base.metadata.create_all(engine)
    logger.info("Database tables verified / created.")


@contextmanager
def get_session(engine: Engine) -> Iterator[Session]:
    """Unit of work: commit on clean exit, roll back on error.

    Objects stay readable after commit, so services can expunge rows and
    hand them to route handlers.
    """
    with Session(engine, expire_on_commit=False) as session:
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise


async def run_db(func: Callable[P, T], *args: P.args, **kwargs: P.kwargs) -> T:
    """Await a sync storage function on a worker thread."""
    return await asyncio.to_thread(func, *args, **kwargs)
