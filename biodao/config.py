"""
biodao.config — YAML Configuration Loader
==========================================

Reads ``config.yaml`` for soft settings (community identity, Discord
application id, notification targets).  Secrets and infrastructure URLs
stay in the environment (``.env``).

Usage::

    from biodao.config import load_config

    cfg = load_config()              # reads ./config.yaml by default
    print(cfg.discord_client_id)     # "1361285493521907832"
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import yaml

from biodao.constants import DEFAULT_DISCORD_CLIENT_ID


# ---------------------------------------------------------------------------
# Typed settings object
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class BioDAOConfig:
    """Immutable configuration loaded from ``config.yaml`` and the env.

    Every field has a default so the API can boot without a config file.
    """

    # Identity
    community_name: str = "BioDAO"

    # Discord application used for the bot install link
    discord_client_id: str = DEFAULT_DISCORD_CLIENT_ID

    # Operations channel (Discord webhook) for sandbox notices
    ops_webhook_url: str | None = None

    # Sender shown on level-up emails
    email_from: str = "team@bio.xyz"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def load_config(path: str | Path = "config.yaml") -> BioDAOConfig:
    """Read *path* and return a :class:`BioDAOConfig` instance.

    A missing file is not an error: defaults are used and environment
    overrides still apply.  Environment variables win over the YAML file:

    * ``DISCORD_CLIENT_ID`` → ``discord_client_id``
    * ``OPS_WEBHOOK_URL``   → ``ops_webhook_url``

    Raises
    ------
    ValueError
        If the file exists but does not contain a YAML mapping.
    """
    raw: dict = {}
    config_path = Path(path)
    if config_path.exists():
        with open(config_path, encoding="utf-8") as fh:
            loaded = yaml.safe_load(fh)
        if loaded is not None and not isinstance(loaded, dict):
            raise ValueError(
                f"Configuration file {config_path.resolve()} must contain a mapping."
            )
        raw = loaded or {}

    client_id = (
        os.getenv("DISCORD_CLIENT_ID")
        or raw.get("discord_client_id")
        or DEFAULT_DISCORD_CLIENT_ID
    )
    webhook = os.getenv("OPS_WEBHOOK_URL") or raw.get("ops_webhook_url") or None

    return BioDAOConfig(
        community_name=raw.get("community_name", "BioDAO"),
        discord_client_id=str(client_id),
        ops_webhook_url=webhook,
        email_from=raw.get("email_from", "team@bio.xyz"),
    )
