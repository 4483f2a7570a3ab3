"""
biodao.engine.levels — Level Progression Rules
===============================================

Handler-registry implementation of the Discord level ladder.  Each entry
in :data:`LEVEL_RULES` is keyed by the level a project is *currently* at
and holds a pure predicate over the project's engagement snapshot.

Only the rule anchored at the current level is consulted, so a single
evaluation never moves a project more than one step, even when its
metrics already satisfy a later threshold.

This module is pure calculation — no database I/O, no Discord I/O.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from biodao.constants import (
    LEVEL_3_MIN_MEMBERS,
    LEVEL_4_MIN_MEMBERS,
    LEVEL_4_MIN_MESSAGES,
    LEVEL_4_MIN_PAPERS,
    LEVEL_REQUIREMENTS,
    UNKNOWN_LEVEL_REQUIREMENTS,
)

logger = logging.getLogger(__name__)

__all__ = [
    "EngagementSnapshot",
    "LEVEL_RULES",
    "LevelDecision",
    "LevelRule",
    "ProjectSnapshot",
    "evaluate_level",
    "get_next_level_requirements",
]


# ---------------------------------------------------------------------------
# Snapshots — validated inputs to the evaluator
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class EngagementSnapshot:
    """Read-only copy of a project's Discord counters."""

    bot_added: bool = False
    member_count: int = 0
    papers_shared: int = 0
    messages_count: int = 0

    def __post_init__(self) -> None:
        for name in ("member_count", "papers_shared", "messages_count"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative")


@dataclass(frozen=True, slots=True)
class ProjectSnapshot:
    """A project as the evaluator sees it.

    ``discord`` is ``None`` when the project has no linked server yet.
    """

    id: str
    level: int
    email: str | None = None
    discord: EngagementSnapshot | None = None


@dataclass(frozen=True, slots=True)
class LevelDecision:
    """Outcome of :func:`evaluate_level`."""

    project_id: str
    old_level: int
    new_level: int

    @property
    def promoted(self) -> bool:
        return self.new_level > self.old_level


# ---------------------------------------------------------------------------
# Rule predicates — pure functions (snapshot) → bool
# ---------------------------------------------------------------------------
def _meets_level_3(discord: EngagementSnapshot) -> bool:
    """Bot installed and at least 4 members."""
    return discord.bot_added and discord.member_count >= LEVEL_3_MIN_MEMBERS


def _meets_level_4(discord: EngagementSnapshot) -> bool:
    """Members, shared papers and messages all over their thresholds."""
    return (
        discord.member_count >= LEVEL_4_MIN_MEMBERS
        and discord.papers_shared >= LEVEL_4_MIN_PAPERS
        and discord.messages_count >= LEVEL_4_MIN_MESSAGES
    )


@dataclass(frozen=True, slots=True)
class LevelRule:
    target_level: int
    check: Callable[[EngagementSnapshot], bool]


# current level → the single transition allowed from it
LEVEL_RULES: dict[int, LevelRule] = {
    2: LevelRule(target_level=3, check=_meets_level_3),
    3: LevelRule(target_level=4, check=_meets_level_4),
}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def evaluate_level(project: ProjectSnapshot) -> LevelDecision:
    """Decide the level *project* should be at after one evaluation step.

    Returns a decision whose ``new_level`` equals ``old_level`` when there
    is no Discord data, no rule for the current level, or the rule fails.
    """
    unchanged = LevelDecision(project.id, project.level, project.level)

    if project.discord is None:
        return unchanged

    rule = LEVEL_RULES.get(project.level)
    if rule is None:
        return unchanged

    if not rule.check(project.discord):
        return unchanged

    d = project.discord
    logger.info(
        "[Level Check] Project %s meets level %d requirements: "
        "bot=%s members=%d papers=%d messages=%d",
        project.id, rule.target_level,
        d.bot_added, d.member_count, d.papers_shared, d.messages_count,
    )
    return LevelDecision(project.id, project.level, rule.target_level)


def get_next_level_requirements(current_level: int) -> list[str]:
    """Human-readable requirements for the level after *current_level*."""
    return list(LEVEL_REQUIREMENTS.get(current_level, UNKNOWN_LEVEL_REQUIREMENTS))
