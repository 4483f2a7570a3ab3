"""
biodao.engine.discord_parser — Discord Reference Extraction
============================================================

Pulls a server id and/or an invite link out of whatever a founder pasted
into the setup form or chat.  Pure string work; no network lookups.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from biodao.constants import (
    BOT_AUTHORIZE_URL,
    BOT_PERMISSIONS,
    BOT_SCOPE,
    DEFAULT_DISCORD_CLIENT_ID,
)

# Any 17–20 digit run counts as a snowflake.  Long unrelated numbers will
# match too; there is no checksum to tell them apart.
_SERVER_ID_REGEX = re.compile(r"\b(\d{17,20})\b", re.ASCII)

_INVITE_REGEX = re.compile(
    r"(https?://)?(www\.)?(discord\.(gg|io|me|li)|discordapp\.com/invite)"
    r"/([a-zA-Z0-9-]{2,32})",
    re.IGNORECASE,
)


@dataclass(frozen=True, slots=True)
class DiscordReference:
    server_id: str | None = None
    invite_link: str | None = None
    invite_code: str | None = None

    @property
    def is_empty(self) -> bool:
        return self.server_id is None and self.invite_code is None

    def to_dict(self) -> dict[str, str | None]:
        return {
            "serverId": self.server_id,
            "inviteLink": self.invite_link,
            "inviteCode": self.invite_code,
        }


def extract_discord_info(message: str) -> DiscordReference:
    """Extract a server id and invite link/code from *message*.

    The two searches are independent, so the result may carry either,
    both or neither.
    """
    if not isinstance(message, str):
        return DiscordReference()

    server_id = None
    match = _SERVER_ID_REGEX.search(message)
    if match:
        server_id = match.group(1)

    invite_link = invite_code = None
    match = _INVITE_REGEX.search(message)
    if match:
        invite_link = match.group(0)
        invite_code = match.group(5)

    return DiscordReference(
        server_id=server_id,
        invite_link=invite_link,
        invite_code=invite_code,
    )


def get_bot_installation_url(client_id: str | None = None) -> str:
    """OAuth2 URL that adds the BioDAO bot to a server."""
    return (
        f"{BOT_AUTHORIZE_URL}?client_id={client_id or DEFAULT_DISCORD_CLIENT_ID}"
        f"&permissions={BOT_PERMISSIONS}&scope={BOT_SCOPE}"
    )
