"""
biodao.services.level_service — Discord Level Progression
==========================================================

Glue between the pure rules in :mod:`biodao.engine.levels`, storage and
notifications:

    ProjectSnapshot → evaluate_level → update_project_level → dispatch notices

The public coroutines never raise.  Any failure is logged and reported as
"no level-up", so a broken check can't take down the request that ran it.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from biodao.constants import TERMINAL_LEVEL
from biodao.database.engine import run_db
from biodao.engine.levels import ProjectSnapshot, evaluate_level
from biodao.services.notification_service import Notifier, dispatch
from biodao.services.project_service import load_project_snapshot, update_project_level

if TYPE_CHECKING:
    from sqlalchemy import Engine

logger = logging.getLogger(__name__)


async def check_discord_level_progress(
    engine: Engine,
    project: ProjectSnapshot | None,
    notifier: Notifier,
) -> bool:
    """Level up *project* by one step if its Discord metrics allow it.

    Returns True only when the new level was actually written.
    """
    try:
        if project is None or project.discord is None:
            logger.info(
                "[Level Check] Project %s has no Discord data, skipping check",
                getattr(project, "id", None),
            )
            return False

        decision = evaluate_level(project)
        if not decision.promoted:
            return False

        logger.info(
            "[Level Check] Leveling up project %s from %d to %d",
            project.id, decision.old_level, decision.new_level,
        )
        changed = await run_db(
            update_project_level,
            engine,
            project.id,
            decision.old_level,
            decision.new_level,
        )
        if not changed:
            return False

        if project.email:
            dispatch(
                "level-up",
                notifier.send_level_up_notice,
                project.email,
                decision.new_level,
            )
        if decision.new_level == TERMINAL_LEVEL:
            dispatch("sandbox", notifier.send_terminal_tier_notice, project.id)

        return True
    except Exception:
        logger.exception(
            "Error checking Discord level progress for project %s",
            getattr(project, "id", None),
            extra={"project_id": getattr(project, "id", None)},
        )
        return False


async def check_project_level(
    engine: Engine, project_id: str, notifier: Notifier
) -> bool:
    """Load *project_id* from storage and run the level check on it."""
    try:
        snapshot = await run_db(load_project_snapshot, engine, project_id)
    except Exception:
        logger.exception(
            "Error loading project %s for level check", project_id,
            extra={"project_id": project_id},
        )
        return False
    return await check_discord_level_progress(engine, snapshot, notifier)
