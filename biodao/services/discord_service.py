"""
biodao.services.discord_service — Bot Installation & Server Registration
=========================================================================

Answers "is our bot on this project's server?" and records the server a
founder pasted into the setup form.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from sqlalchemy import select

from biodao.database.engine import get_session
from biodao.database.models import Discord, Project
from biodao.engine.discord_parser import (
    DiscordReference,
    extract_discord_info,
    get_bot_installation_url,
)
from biodao.services.project_service import ProjectNotFoundError

if TYPE_CHECKING:
    from sqlalchemy import Engine

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class InstallationStatus:
    installed: bool
    installation_link: str | None = None

    def to_dict(self) -> dict:
        return {
            "installed": self.installed,
            "installationLink": self.installation_link,
        }


def check_bot_installation_status(
    engine: Engine,
    project_id: str,
    client_id: str | None = None,
) -> InstallationStatus:
    """Report whether the bot is installed on the project's server.

    Never raises.  A failed lookup is reported as "not installed" with the
    install link, so the founder can always retry the installation.
    """
    try:
        with get_session(engine) as session:
            bot_added = session.scalar(
                select(Discord.bot_added).where(Discord.project_id == project_id)
            )
    except Exception:
        logger.exception(
            "Error checking bot installation status for project %s", project_id,
            extra={"project_id": project_id},
        )
        return InstallationStatus(False, get_bot_installation_url(client_id))

    if not bot_added:
        return InstallationStatus(False, get_bot_installation_url(client_id))
    return InstallationStatus(True, None)


def register_discord_server(
    engine: Engine, project_id: str, message: str
) -> DiscordReference:
    """Parse *message* and store any server id / invite on the project.

    Fields not found in *message* leave the stored values untouched.

    Raises
    ------
    ProjectNotFoundError
        If *project_id* does not exist.
    """
    ref = extract_discord_info(message)
    if ref.is_empty:
        return ref

    with get_session(engine) as session:
        if session.get(Project, project_id) is None:
            raise ProjectNotFoundError(project_id)

        row = session.scalar(select(Discord).where(Discord.project_id == project_id))
        if row is None:
            row = Discord(project_id=project_id)
            session.add(row)

        if ref.server_id is not None:
            row.server_id = ref.server_id
        if ref.invite_code is not None:
            row.invite_link = ref.invite_link
            row.invite_code = ref.invite_code

    logger.info(
        "Discord server registered for project %s (server=%s invite=%s)",
        project_id, ref.server_id, ref.invite_code,
    )
    return ref
