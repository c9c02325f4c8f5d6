"""Inactive-player retention for the loadout plugin."""

__version__ = "1.0.0"

from .cleanup import CleanupExecutor
from .config import CleanupSettings, FeatureFlags, RetentionConfig
from .database import Database
from .results import ActivityResult, CleanupResult, ErrorKind
from .scheduler import CleanupScheduler
from .service import CleanupService
from .timers import InlineTaskSpawner, TaskSpawner, TimerHost, TornadoTimerHost

__all__ = [
    "CleanupExecutor",
    "CleanupSettings",
    "FeatureFlags",
    "RetentionConfig",
    "Database",
    "ActivityResult",
    "CleanupResult",
    "ErrorKind",
    "CleanupScheduler",
    "CleanupService",
    "InlineTaskSpawner",
    "TaskSpawner",
    "TimerHost",
    "TornadoTimerHost",
]
