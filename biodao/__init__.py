"""
BioDAO — Project Backend
========================
Tracks BioDAO projects as they mature through four levels.  Levels 3 and 4
are unlocked by activity on the project's own Discord server (bot installed,
members, shared papers, messages).

Package layout::

    biodao/
    ├── config.py          # YAML + env → typed Python config
    ├── constants.py       # Level table, thresholds, bot OAuth constants
    ├── database/
    │   ├── engine.py      # SQLAlchemy engine + async helper
    │   └── models.py      # Project + Discord ORM models
    ├── engine/
    │   ├── levels.py      # Level progression rules (pure)
    │   └── discord_parser.py  # Invite / server-id extraction (pure)
    ├── services/
    │   ├── project_service.py       # Storage interface
    │   ├── discord_service.py       # Bot install status + server registration
    │   ├── level_service.py         # Evaluate → persist → notify
    │   ├── notification_service.py  # Email stub + ops webhook embeds
    │   ├── embeds.py                # Discord embed builders
    │   └── log_buffer.py            # In-memory log ring buffer
    └── api/
        ├── main.py        # FastAPI app
        ├── deps.py        # Dependency injection
        └── routes/        # projects, discord, logs
"""

__version__ = "0.1.0"
