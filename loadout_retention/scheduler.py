"""Cleanup scheduler - registers the timers and spawns cleanup passes."""

import logging

log = logging.getLogger('loadout_retention')

STARTUP_DELAY_SECONDS = 10.0  # let the host finish starting before the first pass


class CleanupScheduler:
    """Recurring trigger for cleanup passes.

    Each tick hands a pass to the task spawner and returns. Passes are not
    synchronized with each other; an overlapping pass computes its own cutoff
    and stale set.
    """

    def __init__(self, executor, config, timer_host, spawner):
        self.executor = executor
        self.config = config
        self.timer_host = timer_host
        self.spawner = spawner
        self._startup_timer = None
        self._cleanup_timer = None

    @property
    def running(self):
        return self._cleanup_timer is not None

    def initialize(self):
        """Register the startup and recurring timers. Returns True when scheduled."""
        settings = self.config.cleanup

        if not settings.enabled:
            log.info("[CleanupScheduler] Database cleanup is disabled in configuration")
            return False

        if settings.inactive_days <= 0:
            log.warning(
                f"[CleanupScheduler] Invalid inactive_days={settings.inactive_days}, "
                f"database cleanup will not run"
            )
            return False

        if self._cleanup_timer is not None:
            log.info("[CleanupScheduler] Already running")
            return True

        if settings.run_on_startup:
            self._startup_timer = self.timer_host.call_later(STARTUP_DELAY_SECONDS, self._startup_tick)

        self._cleanup_timer = self.timer_host.call_every(settings.interval_seconds, self.trigger)
        log.info(
            f"[CleanupScheduler] Initialized - every {settings.interval_minutes} minutes "
            f"for users inactive more than {settings.inactive_days} days"
        )
        return True

    def dispose(self):
        """Cancel pending timers. Passes already spawned keep running."""
        if self._startup_timer is not None:
            self._startup_timer.cancel()
            self._startup_timer = None
        if self._cleanup_timer is not None:
            self._cleanup_timer.cancel()
            self._cleanup_timer = None
            log.info("[CleanupScheduler] Stopped")

    def trigger(self):
        """Spawn one cleanup pass without waiting for it (or for earlier ones)."""
        return self.spawner.spawn(self.run_pass)

    def run_pass(self):
        result = self.executor.run_pass()
        if not result.ok:
            log.error(f"[CleanupScheduler] Error during database cleanup ({result.error_kind.value}): {result.error}")
        return result

    def _startup_tick(self):
        self._startup_timer = None
        self.trigger()
