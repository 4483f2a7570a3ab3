"""
biodao.constants — Shared Constants
====================================

Single source of truth for the level ladder, the Discord thresholds that
gate it, and the bot authorization URL pieces.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Level ladder
# ---------------------------------------------------------------------------
MIN_LEVEL = 1
TERMINAL_LEVEL = 4  # "sandbox" — the Bio team takes over from here

LEVEL_REQUIREMENTS: dict[int, tuple[str, ...]] = {
    1: ("Mint Idea NFT", "Mint Vision NFT"),
    2: ("Create Discord Server", "Reach 4+ Members"),
    3: ("Reach 5+ Members", "Share 5+ Scientific Papers", "Send 50+ Messages"),
    4: ("All requirements met - Bio team will contact you",),
}

UNKNOWN_LEVEL_REQUIREMENTS: tuple[str, ...] = ("Unknown level",)

# ---------------------------------------------------------------------------
# Discord thresholds
# ---------------------------------------------------------------------------
LEVEL_3_MIN_MEMBERS = 4

LEVEL_4_MIN_MEMBERS = 5
LEVEL_4_MIN_PAPERS = 5
LEVEL_4_MIN_MESSAGES = 50

# ---------------------------------------------------------------------------
# Bot authorization link
# ---------------------------------------------------------------------------
DEFAULT_DISCORD_CLIENT_ID = "1361285493521907832"
BOT_PERMISSIONS = "8"  # Administrator
BOT_SCOPE = "bot"
BOT_AUTHORIZE_URL = "https://discord.com/api/oauth2/authorize"
