"""
biodao.services.notification_service — Level-up & Sandbox Notifications
=========================================================================

Two notices go out when a project levels up:

* a level-up email to the project's contact address (delivery is not
  wired yet, the notice is logged), and
* a "sandbox reached" embed to the operations channel when the project hits
  the terminal level, posted through a Discord webhook.

Notices are submitted with :func:`dispatch` as independent asyncio tasks.
A failing notice is logged and never affects the other notice or the
caller.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Protocol

import aiohttp
import discord

from biodao.config import BioDAOConfig
from biodao.services.embeds import build_sandbox_embed

logger = logging.getLogger(__name__)

# Strong references to in-flight notices; the loop only keeps weak ones.
_pending: set[asyncio.Task] = set()


class Notifier(Protocol):
    async def send_level_up_notice(self, email: str, new_level: int) -> None: ...

    async def send_terminal_tier_notice(self, project_id: str) -> None: ...


class NotificationService:
    """Default :class:`Notifier` backed by logging and a Discord webhook."""

    def __init__(self, cfg: BioDAOConfig | None = None) -> None:
        self.cfg = cfg or BioDAOConfig()

    async def send_level_up_notice(self, email: str, new_level: int) -> None:
        # TODO: hand off to the transactional email provider once one is chosen.
        logger.info(
            "Level-up email would be sent to %s for level %d (from %s)",
            email, new_level, self.cfg.email_from,
        )

    async def send_terminal_tier_notice(self, project_id: str) -> None:
        url = self.cfg.ops_webhook_url
        if not url:
            logger.info(
                "Sandbox notification would be sent for project %s "
                "(OPS_WEBHOOK_URL not set)", project_id,
            )
            return

        async with aiohttp.ClientSession() as http:
            webhook = discord.Webhook.from_url(url, session=http)
            await webhook.send(
                embed=build_sandbox_embed(project_id),
                username=self.cfg.community_name,
            )
        logger.info("Sandbox notification posted for project %s", project_id)


# ---------------------------------------------------------------------------
# Task submission
# ---------------------------------------------------------------------------
async def _guarded(label: str, func: Callable[..., Awaitable[None]], *args) -> None:
    try:
        await func(*args)
    except Exception:
        logger.exception(
            "Notification %s failed", label,
            extra={"notification": label},
        )


def dispatch(label: str, func: Callable[..., Awaitable[None]], *args) -> asyncio.Task:
    """Schedule ``func(*args)`` as a fire-and-forget task on the running loop."""
    task = asyncio.get_running_loop().create_task(
        _guarded(label, func, *args), name=f"notify:{label}"
    )
    _pending.add(task)
    task.add_done_callback(_pending.discard)
    return task


async def drain() -> None:
    """Wait for every in-flight notice.  Used on shutdown and in tests."""
    loop = asyncio.get_running_loop()
    while True:
        # Tasks left behind by an earlier, closed loop can never finish here.
        tasks = [t for t in _pending if t.get_loop() is loop]
        _pending.difference_update(t for t in list(_pending) if t.get_loop() is not loop)
        if not tasks:
            return
        await asyncio.gather(*tasks, return_exceptions=True)


def pending_count() -> int:
    return len(_pending)
