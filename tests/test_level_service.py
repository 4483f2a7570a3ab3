"""
tests/test_level_service.py — Level Check Integration Tests
============================================================
Runs check_discord_level_progress() against an in-memory SQLite database
with a mock notifier, covering persistence, notification dispatch and the
never-raise contract.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from conftest import run_async, seed_project, stored_level

from biodao.engine.levels import EngagementSnapshot, ProjectSnapshot
from biodao.services import level_service
from biodao.services.level_service import (
    check_discord_level_progress,
    check_project_level,
)
from biodao.services.notification_service import drain
from biodao.services.project_service import load_project_snapshot

LEVEL_3_SERVER = {"bot_added": True, "member_count": 4}
LEVEL_4_SERVER = {
    "bot_added": True,
    "member_count": 5,
    "papers_shared": 5,
    "messages_count": 50,
}


def _check(engine, project_id, notifier):
    """Run the stored-project level check and wait for its notices."""
    async def _run():
        result = await check_project_level(engine, project_id, notifier)
        await drain()
        return result
    return run_async(_run())


def _check_snapshot(engine, snapshot, notifier):
    async def _run():
        result = await check_discord_level_progress(engine, snapshot, notifier)
        await drain()
        return result
    return run_async(_run())


class TestPromotion:
    def test_level_2_to_3(self, db_engine, notifier):
        seed_project(db_engine, level=2, discord=LEVEL_3_SERVER)

        assert _check(db_engine, "proj-1", notifier) is True
        assert stored_level(db_engine) == 3
        notifier.send_level_up_notice.assert_awaited_once_with("founder@example.org", 3)
        notifier.send_terminal_tier_notice.assert_not_called()

    def test_level_3_to_4_sends_sandbox_notice(self, db_engine, notifier):
        seed_project(db_engine, level=3, discord=LEVEL_4_SERVER)

        assert _check(db_engine, "proj-1", notifier) is True
        assert stored_level(db_engine) == 4
        notifier.send_level_up_notice.assert_awaited_once_with("founder@example.org", 4)
        notifier.send_terminal_tier_notice.assert_awaited_once_with("proj-1")

    def test_no_email_skips_level_up_notice(self, db_engine, notifier):
        seed_project(db_engine, level=3, email=None, discord=LEVEL_4_SERVER)

        assert _check(db_engine, "proj-1", notifier) is True
        notifier.send_level_up_notice.assert_not_called()
        notifier.send_terminal_tier_notice.assert_awaited_once_with("proj-1")

    def test_one_step_per_call(self, db_engine, notifier):
        seed_project(db_engine, level=2, discord=LEVEL_4_SERVER)

        assert _check(db_engine, "proj-1", notifier) is True
        assert stored_level(db_engine) == 3
        assert _check(db_engine, "proj-1", notifier) is True
        assert stored_level(db_engine) == 4
        assert _check(db_engine, "proj-1", notifier) is False
        assert stored_level(db_engine) == 4


class TestNoPromotion:
    @pytest.mark.parametrize(
        "discord",
        [
            {"bot_added": True, "member_count": 3},
            {"bot_added": False, "member_count": 10},
        ],
    )
    def test_level_2_not_eligible(self, db_engine, notifier, discord):
        seed_project(db_engine, level=2, discord=discord)

        assert _check(db_engine, "proj-1", notifier) is False
        assert stored_level(db_engine) == 2
        notifier.send_level_up_notice.assert_not_called()

    @pytest.mark.parametrize("missing", ["member_count", "papers_shared", "messages_count"])
    def test_level_3_missing_one_threshold(self, db_engine, notifier, missing):
        discord = dict(LEVEL_4_SERVER)
        discord[missing] -= 1
        seed_project(db_engine, level=3, discord=discord)

        assert _check(db_engine, "proj-1", notifier) is False
        assert stored_level(db_engine) == 3

    @pytest.mark.parametrize("level", [1, 2, 3, 4])
    def test_no_discord_record(self, db_engine, notifier, level):
        seed_project(db_engine, level=level, discord=None)

        assert _check(db_engine, "proj-1", notifier) is False
        assert stored_level(db_engine) == level

    def test_unknown_project(self, db_engine, notifier):
        assert _check(db_engine, "missing", notifier) is False

    def test_none_project(self, db_engine, notifier):
        assert _check_snapshot(db_engine, None, notifier) is False

    def test_stale_snapshot_does_not_lower_or_renotify(self, db_engine, notifier):
        seed_project(db_engine, level=2, discord=LEVEL_3_SERVER)
        stale = load_project_snapshot(db_engine, "proj-1")

        assert _check_snapshot(db_engine, stale, notifier) is True
        notifier.send_level_up_notice.reset_mock()

        # Same (now outdated) snapshot again: the stored level is already 3
        assert _check_snapshot(db_engine, stale, notifier) is False
        assert stored_level(db_engine) == 3
        notifier.send_level_up_notice.assert_not_called()

    @pytest.mark.parametrize("stored", [1, 2])
    def test_snapshot_ahead_of_storage_cannot_skip_levels(self, db_engine, notifier, stored):
        seed_project(db_engine, level=stored, discord=LEVEL_4_SERVER)
        claims_level_3 = ProjectSnapshot(
            id="proj-1",
            level=3,
            email="founder@example.org",
            discord=EngagementSnapshot(**LEVEL_4_SERVER),
        )

        for _ in range(3):
            assert _check_snapshot(db_engine, claims_level_3, notifier) is False
        assert stored_level(db_engine) == stored
        notifier.send_level_up_notice.assert_not_called()
        notifier.send_terminal_tier_notice.assert_not_called()


class TestFailureIsolation:
    def test_storage_failure_returns_false(self, db_engine, notifier):
        seed_project(db_engine, level=2, discord=LEVEL_3_SERVER)

        with patch.object(
            level_service, "update_project_level", side_effect=RuntimeError("db down")
        ):
            assert _check(db_engine, "proj-1", notifier) is False

        assert stored_level(db_engine) == 2
        notifier.send_level_up_notice.assert_not_called()

    def test_snapshot_load_failure_returns_false(self, db_engine, notifier):
        with patch.object(
            level_service, "load_project_snapshot", side_effect=RuntimeError("db down")
        ):
            assert _check(db_engine, "proj-1", notifier) is False

    def test_failing_email_does_not_block_sandbox_notice(self, db_engine, notifier):
        notifier.send_level_up_notice = AsyncMock(side_effect=RuntimeError("smtp"))
        seed_project(db_engine, level=3, discord=LEVEL_4_SERVER)

        assert _check(db_engine, "proj-1", notifier) is True
        assert stored_level(db_engine) == 4
        notifier.send_terminal_tier_notice.assert_awaited_once_with("proj-1")

    def test_sync_notifier_error_is_contained(self, db_engine):
        broken = MagicMock()
        broken.send_level_up_notice = MagicMock(side_effect=TypeError("not async"))
        broken.send_terminal_tier_notice = AsyncMock()
        seed_project(db_engine, level=3, discord=LEVEL_4_SERVER)

        assert _check(db_engine, "proj-1", broken) is True
        broken.send_terminal_tier_notice.assert_awaited_once_with("proj-1")

    def test_failure_is_logged(self, db_engine, notifier, caplog):
        seed_project(db_engine, level=2, discord=LEVEL_3_SERVER)

        with patch.object(
            level_service, "update_project_level", side_effect=RuntimeError("db down")
        ):
            _check(db_engine, "proj-1", notifier)

        assert any(
            "Error checking Discord level progress" in r.getMessage()
            for r in caplog.records
        )
