"""Cleanup service - the host-facing facade and the standalone process.

Runs standalone as ``python -m loadout_retention.service``: reads LOADOUT_*
settings from the environment, creates missing tables, and keeps the cleanup
schedule on a Tornado IOLoop until interrupted.
"""

import logging
import os
import sys

from .cleanup import CleanupExecutor
from .config import RetentionConfig
from .database import Database
from .scheduler import CleanupScheduler
from .timers import TaskSpawner, TornadoTimerHost

log = logging.getLogger('loadout_retention')

DEFAULT_DATABASE_URL = 'sqlite:////data/loadout.sqlite'


class CleanupService:
    """What the host calls: initialize, dispose, record_activity.

    Usage:
        service = CleanupService(config, database, timer_host, spawner)
        service.initialize()
        service.record_activity(steamid)   # from any in-process component
        service.dispose()
    """

    def __init__(self, config, database, timer_host=None, spawner=None):
        self.config = config
        self.database = database
        self.timer_host = timer_host or TornadoTimerHost()
        self.spawner = spawner or TaskSpawner()
        self.executor = CleanupExecutor(database, config)
        self.scheduler = CleanupScheduler(self.executor, config, self.timer_host, self.spawner)

    def initialize(self):
        return self.scheduler.initialize()

    def dispose(self):
        self.scheduler.dispose()

    def perform_cleanup(self):
        """Run one pass on the calling thread and return its CleanupResult."""
        return self.scheduler.run_pass()

    def record_activity(self, steamid):
        """Queue a last-seen update; never blocks or raises into the caller."""
        return self.spawner.spawn(self._record_activity, steamid)

    def _record_activity(self, steamid):
        result = self.executor.record_activity(steamid)
        if not result.ok:
            log.error(f"[DatabaseCleanup] Error updating player activity tracking: {result.error}")
        return result


def main():
    """Entry point for the standalone service."""
    logging.basicConfig(
        level=logging.INFO,
        format='[%(levelname)1.1s %(asctime)s.%(msecs)03d %(name)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
    )
    from tornado.ioloop import IOLoop

    config = RetentionConfig.from_env()
    database = Database(os.environ.get('LOADOUT_DATABASE_URL', DEFAULT_DATABASE_URL))
    database.create_schema()

    service = CleanupService(config, database)
    if not service.initialize():
        log.info("Nothing scheduled, exiting")
        return

    try:
        IOLoop.current().start()
    except KeyboardInterrupt:
        log.info("Shutting down")
        service.dispose()
        service.spawner.shutdown(wait=False)
        database.dispose()
        sys.exit(0)


if __name__ == '__main__':
    main()
