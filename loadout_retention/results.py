"""Operation results - failures are returned, not raised."""

import enum
from dataclasses import dataclass, field
from typing import Dict, List, Optional


class ErrorKind(enum.Enum):
    CONNECTION = 'connection'
    QUERY = 'query'


@dataclass
class CleanupResult:
    """Outcome of one cleanup pass.

    A failed pass keeps the per-category counts that were committed before the
    error; those deletes are not rolled back.
    """
    ok: bool
    cutoff: Optional[str] = None
    stale_ids: List[str] = field(default_factory=list)
    deleted: Dict[str, int] = field(default_factory=dict)
    tracking_deleted: int = 0
    error_kind: Optional[ErrorKind] = None
    error: Optional[str] = None

    @property
    def total_deleted(self):
        return sum(self.deleted.values())

    def as_dict(self):
        return {
            "ok": self.ok,
            "cutoff": self.cutoff,
            "stale_count": len(self.stale_ids),
            "deleted": dict(self.deleted),
            "total_deleted": self.total_deleted,
            "tracking_deleted": self.tracking_deleted,
            "error_kind": self.error_kind.value if self.error_kind else None,
            "error": self.error,
        }


@dataclass
class ActivityResult:
    ok: bool
    skipped: bool = False
    error_kind: Optional[ErrorKind] = None
    error: Optional[str] = None
