"""
biodao.api.routes.projects — Project level endpoints
=====================================================
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from biodao.api.deps import get_engine
from biodao.constants import TERMINAL_LEVEL
from biodao.database.engine import run_db
from biodao.engine.levels import get_next_level_requirements
from biodao.services.project_service import get_project

router = APIRouter(prefix="/projects", tags=["projects"])


@router.get("/levels/{level}/requirements")
def level_requirements(level: int):
    return {"level": level, "requirements": get_next_level_requirements(level)}


@router.get("/{project_id}")
async def read_project(project_id: str, engine=Depends(get_engine)):
    project = await run_db(get_project, engine, project_id)
    if project is None:
        raise HTTPException(404, "Project not found")

    discord = project.discord
    return {
        "id": project.id,
        "name": project.name,
        "level": project.level,
        "is_sandbox": project.level >= TERMINAL_LEVEL,
        "next_requirements": get_next_level_requirements(project.level),
        "discord": None if discord is None else {
            "serverId": discord.server_id,
            "inviteLink": discord.invite_link,
            "botAdded": discord.bot_added,
            "memberCount": discord.member_count,
            "papersShared": discord.papers_shared,
            "messagesCount": discord.messages_count,
        },
    }
