"""Functional tests for CleanupService - the host-facing facade."""

from unittest.mock import patch

from sqlalchemy import select

from loadout_retention.model import PlayerSkin, PlayerTracking
from loadout_retention.results import ErrorKind
from loadout_retention.service import CleanupService
from loadout_retention.timers import InlineTaskSpawner


def _service(config, memory_db, timer_host):
    return CleanupService(config, memory_db, timer_host=timer_host, spawner=InlineTaskSpawner())


class TestLifecycle:
    def test_initialize_and_dispose(self, config, memory_db, timer_host):
        service = _service(config, memory_db, timer_host)
        assert service.initialize()
        assert service.scheduler.running
        service.dispose()
        assert not service.scheduler.running
        assert timer_host.every[0][2].cancelled

    def test_disabled_initialize(self, config, memory_db, timer_host):
        config.cleanup.enabled = False
        assert not _service(config, memory_db, timer_host).initialize()
        assert timer_host.every == []


class TestRecordActivity:
    def test_records_then_tick_keeps_active_player(self, config, memory_db, timer_host, db_session):
        """Tracked player survives a scheduled pass."""
        service = _service(config, memory_db, timer_host)
        assert service.record_activity("76561198000000001").result().ok

        service.initialize()
        _, tick, _ = timer_host.every[0]
        result = tick().result()

        assert result.ok and result.stale_ids == []
        assert db_session.execute(select(PlayerTracking.steamid)).scalars().all() == ["76561198000000001"]

    def test_failure_logged_not_raised(self, config, memory_db, timer_host, caplog):
        service = _service(config, memory_db, timer_host)
        with patch.object(memory_db, "connect", side_effect=RuntimeError("refused")):
            with caplog.at_level("ERROR", logger="loadout_retention"):
                result = service.record_activity("A").result()

        assert result.error_kind is ErrorKind.CONNECTION
        assert "Error updating player activity tracking: refused" in caplog.text


class TestPerformCleanup:
    def test_manual_pass(self, config, memory_db, timer_host, seed, db_session):
        seed(PlayerTracking, steamid="A", first_seen="2020-01-01 00:00:00", last_seen="2020-01-01 00:00:00")
        seed(PlayerSkin, steamid="A", team=2, weapon_defindex=7, weapon_paint_id=44)

        result = _service(config, memory_db, timer_host).perform_cleanup()

        assert result.ok
        assert result.as_dict()["total_deleted"] == 1
        assert db_session.execute(select(PlayerSkin)).all() == []
