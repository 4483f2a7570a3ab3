"""
biodao.database.models — SQLAlchemy 2.0 Data Models
====================================================

Tables:
- projects — BioDAO projects and their current level
- discord  — One row per project: server identity + engagement counters

The engagement counters are written by the Discord ingestion process; this
package only reads them (and bumps ``projects.level``).
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------
class Base(DeclarativeBase):
    """Shared base for all BioDAO ORM models."""


# ---------------------------------------------------------------------------
# Projects
# ---------------------------------------------------------------------------
class Project(Base):
    __tablename__ = "projects"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(200), default="")
    email: Mapped[str | None] = mapped_column(String(320), default=None)
    level: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    discord: Mapped[Discord | None] = relationship(
        back_populates="project", uselist=False, cascade="all, delete-orphan"
    )

    __table_args__ = (
        CheckConstraint("level BETWEEN 1 AND 4", name="ck_projects_level_range"),
    )

    def __repr__(self) -> str:
        return f"<Project id={self.id!r} lvl={self.level}>"


# ---------------------------------------------------------------------------
# Discord — engagement metrics for a project's server
# ---------------------------------------------------------------------------
class Discord(Base):
    """The Discord server linked to a project and its activity counters."""
    __tablename__ = "discord"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    project_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("projects.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    server_id: Mapped[str | None] = mapped_column(String(20), default=None)
    invite_link: Mapped[str | None] = mapped_column(String(200), default=None)
    invite_code: Mapped[str | None] = mapped_column(String(32), default=None)
    bot_added: Mapped[bool] = mapped_column(Boolean, default=False)
    member_count: Mapped[int] = mapped_column(Integer, default=0)
    papers_shared: Mapped[int] = mapped_column(Integer, default=0)
    messages_count: Mapped[int] = mapped_column(Integer, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    project: Mapped[Project] = relationship(back_populates="discord")

    def __repr__(self) -> str:
        return (
            f"<Discord project={self.project_id!r} bot={self.bot_added} "
            f"members={self.member_count}>"
        )
