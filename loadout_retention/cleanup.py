"""Cleanup executor - inactive-player purge and activity upsert."""

import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy import delete, insert, select, update

from .model import CATEGORY_MODELS, PlayerTracking, format_timestamp
from .results import ActivityResult, CleanupResult, ErrorKind

log = logging.getLogger('loadout_retention')

DELETE_BATCH_SIZE = 500  # ids per IN (...) list


class CleanupExecutor:
    """Runs cleanup passes and activity upserts against one database.

    Usage:
        executor = CleanupExecutor(database, config)
        result = executor.run_pass()
        executor.record_activity(steamid)

    Neither method raises on database errors; both return a result carrying
    the error kind and message.
    """

    def __init__(self, database, config):
        self.database = database
        self.config = config

    @property
    def _log_enabled(self):
        return self.config.cleanup.log_cleanup

    def run_pass(self, now=None):
        """Delete loadout and tracking rows for players idle past the threshold."""
        now = now or datetime.now(timezone.utc)
        cutoff = format_timestamp(now - timedelta(days=self.config.cleanup.inactive_days))
        result = CleanupResult(ok=True, cutoff=cutoff)

        try:
            conn = self.database.connect()
        except Exception as e:
            result.ok = False
            result.error_kind = ErrorKind.CONNECTION
            result.error = str(e)
            return result

        with conn:
            try:
                stale_ids = conn.execute(
                    select(PlayerTracking.steamid)
                    .where(PlayerTracking.last_seen < cutoff)
                    .distinct()
                ).scalars().all()
                conn.commit()
                result.stale_ids = list(stale_ids)

                if not result.stale_ids:
                    if self._log_enabled:
                        log.info("[DatabaseCleanup] No inactive users found")
                    return result

                for category in self.config.features.enabled_categories():
                    model, label = CATEGORY_MODELS[category]
                    deleted = self._delete_in_batches(conn, model, result.stale_ids)
                    result.deleted[category] = deleted
                    if self._log_enabled:
                        log.info(f"[DatabaseCleanup] Deleted {deleted} {label} records for inactive users")

                # Tracking rows go last and regardless of category flags
                result.tracking_deleted = self._delete_in_batches(conn, PlayerTracking, result.stale_ids)
            except Exception as e:
                conn.rollback()
                result.ok = False
                result.error_kind = ErrorKind.QUERY
                result.error = str(e)
                return result

        if self._log_enabled:
            log.info(
                f"[DatabaseCleanup] Completed: {result.total_deleted} total records deleted "
                f"for {len(result.stale_ids)} inactive users"
            )
        return result

    def record_activity(self, steamid, now=None):
        """Upsert the tracking row: insert first/last seen, or bump last_seen."""
        if isinstance(steamid, int) and not isinstance(steamid, bool):
            steamid = str(steamid)
        if not self.config.cleanup.enabled or not isinstance(steamid, str) or not steamid.strip():
            return ActivityResult(ok=True, skipped=True)

        now = now or datetime.now(timezone.utc)
        stamp = format_timestamp(now)

        try:
            conn = self.database.connect()
        except Exception as e:
            return ActivityResult(ok=False, error_kind=ErrorKind.CONNECTION, error=str(e))

        with conn:
            try:
                stmt = self._upsert_statement(steamid, stamp)
                if stmt is not None:
                    conn.execute(stmt)
                else:
                    self._update_or_insert(conn, steamid, stamp)
                conn.commit()
            except Exception as e:
                conn.rollback()
                return ActivityResult(ok=False, error_kind=ErrorKind.QUERY, error=str(e))

        return ActivityResult(ok=True)

    def _delete_in_batches(self, conn, model, steamids):
        """Delete rows for steamids, committing each batch. Returns the row count."""
        deleted = 0
        for start in range(0, len(steamids), DELETE_BATCH_SIZE):
            batch = steamids[start:start + DELETE_BATCH_SIZE]
            deleted += conn.execute(delete(model).where(model.steamid.in_(batch))).rowcount
            conn.commit()
        return deleted

    def _upsert_statement(self, steamid, stamp):
        """Dialect-native upsert, or None when the dialect has none."""
        values = {'steamid': steamid, 'first_seen': stamp, 'last_seen': stamp}
        dialect = self.database.dialect_name

        if dialect in ('sqlite', 'postgresql'):
            if dialect == 'sqlite':
                from sqlalchemy.dialects.sqlite import insert as dialect_insert
            else:
                from sqlalchemy.dialects.postgresql import insert as dialect_insert
            stmt = dialect_insert(PlayerTracking).values(**values)
            return stmt.on_conflict_do_update(
                index_elements=[PlayerTracking.steamid],
                set_={'last_seen': stmt.excluded.last_seen},
            )

        if dialect in ('mysql', 'mariadb'):
            from sqlalchemy.dialects.mysql import insert as dialect_insert
            stmt = dialect_insert(PlayerTracking).values(**values)
            return stmt.on_duplicate_key_update(last_seen=stmt.inserted.last_seen)

        return None

    def _update_or_insert(self, conn, steamid, stamp):
        updated = conn.execute(
            update(PlayerTracking)
            .where(PlayerTracking.steamid == steamid)
            .values(last_seen=stamp)
        ).rowcount
        if not updated:
            conn.execute(
                insert(PlayerTracking).values(steamid=steamid, first_seen=stamp, last_seen=stamp)
            )
