"""
biodao.api.deps — FastAPI dependency injection
===============================================
"""

from __future__ import annotations

from functools import lru_cache

from sqlalchemy import Engine

from biodao.config import BioDAOConfig, load_config
from biodao.database.engine import create_db_engine
from biodao.services.notification_service import NotificationService, Notifier


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    return create_db_engine()


@lru_cache(maxsize=1)
def get_config() -> BioDAOConfig:
    return load_config()


@lru_cache(maxsize=1)
def get_notifier() -> Notifier:
    return NotificationService(get_config())
