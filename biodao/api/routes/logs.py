"""
biodao.api.routes.logs — Recent log records for operators
==========================================================
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query

from biodao.services.log_buffer import VALID_LEVELS, get_logs

router = APIRouter(tags=["logs"])


@router.get("/logs")
def read_logs(
    tail: int = Query(200, ge=1, le=1000),
    level: str | None = Query(None),
):
    if level is not None and level.upper() not in VALID_LEVELS:
        raise HTTPException(400, f"Invalid level. Must be one of {VALID_LEVELS}")
    return {"logs": get_logs(tail=tail, level=level)}
