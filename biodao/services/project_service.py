"""
biodao.services.project_service — Project & Engagement Storage
===============================================================

Sync storage functions used by the level check and the API.  Call them
from coroutines through :func:`biodao.database.engine.run_db`.

Rows handed back to callers are expunged from their session, so they can
be read after the session closes.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import select, update

from biodao.database.engine import get_session
from biodao.database.models import Discord, Project
from biodao.engine.levels import EngagementSnapshot, ProjectSnapshot

if TYPE_CHECKING:
    from sqlalchemy import Engine

logger = logging.getLogger(__name__)


class ProjectNotFoundError(LookupError):
    """Raised when an operation targets a project id that does not exist."""

    def __init__(self, project_id: str) -> None:
        super().__init__(f"Project {project_id!r} not found")
        self.project_id = project_id


def _to_engagement(row: Discord) -> EngagementSnapshot:
    return EngagementSnapshot(
        bot_added=bool(row.bot_added),
        member_count=row.member_count or 0,
        papers_shared=row.papers_shared or 0,
        messages_count=row.messages_count or 0,
    )


def get_project(engine: Engine, project_id: str) -> Project | None:
    """Fetch a detached Project row (with its Discord row loaded)."""
    with get_session(engine) as session:
        project = session.get(Project, project_id)
        if project is None:
            return None
        project.discord  # load before detaching; expunge cascades to it
        session.expunge(project)
        return project


def find_discord_engagement(
    engine: Engine, project_id: str
) -> EngagementSnapshot | None:
    """Return the project's Discord counters, or ``None`` if unlinked."""
    with get_session(engine) as session:
        row = session.scalar(select(Discord).where(Discord.project_id == project_id))
        if row is None:
            return None
        return _to_engagement(row)


def load_project_snapshot(engine: Engine, project_id: str) -> ProjectSnapshot | None:
    """Build the evaluator's view of a project from storage."""
    with get_session(engine) as session:
        project = session.get(Project, project_id)
        if project is None:
            return None
        discord = project.discord
        return ProjectSnapshot(
            id=project.id,
            level=project.level,
            email=project.email,
            discord=_to_engagement(discord) if discord is not None else None,
        )


def update_project_level(
    engine: Engine, project_id: str, old_level: int, new_level: int
) -> bool:
    """Move a project from *old_level* to *new_level* (compare-and-set).

    Nothing is written unless the stored level still equals *old_level*,
    so a stale or wrong snapshot can never skip or lower a level.  Returns
    True if a row was changed.
    """
    if new_level != old_level + 1:
        raise ValueError(
            f"Level must move one step at a time ({old_level} → {new_level})"
        )

    with get_session(engine) as session:
        result = session.execute(
            update(Project)
            .where(Project.id == project_id, Project.level == old_level)
            .values(level=new_level)
        )
        changed = result.rowcount > 0
    if changed:
        logger.info(
            "Project %s level set from %d to %d", project_id, old_level, new_level
        )
    else:
        logger.warning(
            "Project %s level not updated to %d (missing or not at level %d)",
            project_id, new_level, old_level,
        )
    return changed
