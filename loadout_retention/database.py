"""Database access - engine ownership, connection acquisition, schema setup."""

import logging

from sqlalchemy import create_engine

from .model import LoadoutBase

log = logging.getLogger('loadout_retention')


class Database:
    """Thin wrapper over a pooled SQLAlchemy engine.

    Every operation acquires its own connection, so concurrent cleanup passes
    and activity updates never share one.
    """

    def __init__(self, url=None, engine=None, **engine_kwargs):
        if engine is None and url is None:
            raise ValueError("Database needs a url or an engine")
        self.engine = engine if engine is not None else create_engine(url, **engine_kwargs)

    @property
    def dialect_name(self):
        return self.engine.dialect.name

    def connect(self):
        """Acquire a pooled connection (use as a context manager)."""
        return self.engine.connect()

    def create_schema(self):
        """Create any missing loadout tables."""
        LoadoutBase.metadata.create_all(self.engine)
        log.info(f"[Database] Schema ready: {self.engine.url.render_as_string(hide_password=True)}")

    def dispose(self):
        self.engine.dispose()
