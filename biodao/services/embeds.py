"""
biodao.services.embeds — Discord embed builders for notifications
==================================================================

All embed construction lives here so the notification service only needs
to supply data.
"""

from __future__ import annotations

import discord

from biodao.constants import TERMINAL_LEVEL


def build_sandbox_embed(project_id: str, project_name: str | None = None) -> discord.Embed:
    """Ops-channel notice that a project reached the sandbox level."""
    label = project_name or project_id
    embed = discord.Embed(
        title="\U0001f9ea Sandbox Reached",
        description=(
            f"Project **{label}** reached **Level {TERMINAL_LEVEL}**.\n"
            "All Discord requirements are met; reach out to the founders."
        ),
        color=discord.Color.green(),
    )
    embed.add_field(name="Project ID", value=f"`{project_id}`", inline=False)
    return embed

