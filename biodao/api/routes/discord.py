"""
biodao.api.routes.discord — Discord setup, bot status & level checks
=====================================================================
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from biodao.api.deps import get_config, get_engine, get_notifier
from biodao.config import BioDAOConfig
from biodao.database.engine import run_db
from biodao.engine.discord_parser import get_bot_installation_url
from biodao.engine.levels import EngagementSnapshot, ProjectSnapshot
from biodao.services.discord_service import (
    check_bot_installation_status,
    register_discord_server,
)
from biodao.services.level_service import (
    check_discord_level_progress,
    check_project_level,
)
from biodao.services.project_service import ProjectNotFoundError, get_project

router = APIRouter(prefix="/discord", tags=["discord"])


# ---------------------------------------------------------------------------
# Pydantic schemas
# ---------------------------------------------------------------------------
class SetupRequest(BaseModel):
    project_id: str = Field(alias="projectId", min_length=1)
    message: str

    model_config = ConfigDict(populate_by_name=True)


class DiscordMetricsIn(BaseModel):
    bot_added: bool = Field(False, alias="botAdded")
    member_count: int = Field(0, ge=0, alias="memberCount")
    papers_shared: int = Field(0, ge=0, alias="papersShared")
    messages_count: int = Field(0, ge=0, alias="messagesCount")

    model_config = ConfigDict(populate_by_name=True)


class ProjectIn(BaseModel):
    """Project payload pushed by the ingestion webhook."""

    id: str = Field(min_length=1)
    level: int = Field(ge=1, le=4)
    email: str | None = None
    discord: DiscordMetricsIn | None = Field(None, alias="Discord")

    model_config = ConfigDict(populate_by_name=True)

    def to_snapshot(self) -> ProjectSnapshot:
        d = self.discord
        return ProjectSnapshot(
            id=self.id,
            level=self.level,
            email=self.email or None,
            discord=None if d is None else EngagementSnapshot(
                bot_added=d.bot_added,
                member_count=d.member_count,
                papers_shared=d.papers_shared,
                messages_count=d.messages_count,
            ),
        )


# ---------------------------------------------------------------------------
# Setup & bot installation
# ---------------------------------------------------------------------------
@router.post("/setup")
async def setup_discord(
    body: SetupRequest,
    engine=Depends(get_engine),
    cfg: BioDAOConfig = Depends(get_config),
):
    try:
        ref = await run_db(register_discord_server, engine, body.project_id, body.message)
    except ProjectNotFoundError:
        raise HTTPException(404, "Project not found")
    if ref.is_empty:
        raise HTTPException(422, "No Discord server ID or invite link found in message")

    status = await run_db(
        check_bot_installation_status, engine, body.project_id, cfg.discord_client_id
    )
    return {"discord": ref.to_dict(), **status.to_dict()}


@router.get("/bot-url")
def bot_url(cfg: BioDAOConfig = Depends(get_config)):
    return {"installationLink": get_bot_installation_url(cfg.discord_client_id)}


@router.get("/{project_id}/bot-status")
async def bot_status(
    project_id: str,
    engine=Depends(get_engine),
    cfg: BioDAOConfig = Depends(get_config),
):
    status = await run_db(
        check_bot_installation_status, engine, project_id, cfg.discord_client_id
    )
    return status.to_dict()


# ---------------------------------------------------------------------------
# Level checks
# ---------------------------------------------------------------------------
@router.post("/level-check")
async def level_check_payload(
    body: ProjectIn,
    engine=Depends(get_engine),
    notifier=Depends(get_notifier),
):
    leveled_up = await check_discord_level_progress(engine, body.to_snapshot(), notifier)
    return {"leveled_up": leveled_up}


@router.post("/{project_id}/level-check")
async def level_check_stored(
    project_id: str,
    engine=Depends(get_engine),
    notifier=Depends(get_notifier),
):
    leveled_up = await check_project_level(engine, project_id, notifier)
    project = await run_db(get_project, engine, project_id)
    if project is None:
        raise HTTPException(404, "Project not found")
    return {"leveled_up": leveled_up, "level": project.level}
