"""Loadout ORM models - tracking table plus the per-category tables it owns."""

from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, Integer, String
from sqlalchemy.orm import declarative_base
from sqlalchemy.types import TypeDecorator

LoadoutBase = declarative_base()

TIMESTAMP_FORMAT = '%Y-%m-%d %H:%M:%S'


def format_timestamp(value):
    """Render a datetime as the fixed-width UTC storage string."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime(TIMESTAMP_FORMAT)


def parse_timestamp(value):
    return datetime.strptime(value, TIMESTAMP_FORMAT).replace(tzinfo=timezone.utc)


class UtcTimestamp(TypeDecorator):
    """UTC datetime stored as 'YYYY-MM-DD HH:MM:SS' (second precision).

    Fixed width, so string comparison in SQL matches chronological order.
    Naive datetimes are taken to be UTC already.
    """
    impl = String(19)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None or isinstance(value, str):
            return value
        return format_timestamp(value)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return parse_timestamp(value)


class PlayerTracking(LoadoutBase):
    """One row per player: when they were first and last seen."""
    __tablename__ = 'wp_player_tracking'

    steamid = Column(String(18), primary_key=True)
    first_seen = Column(UtcTimestamp, nullable=False)
    last_seen = Column(UtcTimestamp, nullable=False, index=True)


class PlayerSkin(LoadoutBase):
    __tablename__ = 'wp_player_skins'

    steamid = Column(String(18), primary_key=True)
    team = Column(Integer, primary_key=True, default=0)
    weapon_defindex = Column(Integer, primary_key=True)
    weapon_paint_id = Column(Integer, nullable=False)
    weapon_wear = Column(String(16), default='0.000001')
    weapon_seed = Column(Integer, default=0)
    weapon_nametag = Column(String(128), nullable=True)
    weapon_stattrak = Column(Boolean, default=False)
    weapon_stattrak_count = Column(Integer, default=0)


class PlayerKnife(LoadoutBase):
    __tablename__ = 'wp_player_knife'

    steamid = Column(String(18), primary_key=True)
    team = Column(Integer, primary_key=True, default=0)
    knife = Column(String(64), nullable=False)


class PlayerGloves(LoadoutBase):
    __tablename__ = 'wp_player_gloves'

    steamid = Column(String(18), primary_key=True)
    team = Column(Integer, primary_key=True, default=0)
    weapon_defindex = Column(Integer, nullable=False)


class PlayerAgent(LoadoutBase):
    __tablename__ = 'wp_player_agents'

    steamid = Column(String(18), primary_key=True)
    agent_ct = Column(String(64), nullable=True)
    agent_t = Column(String(64), nullable=True)


class PlayerMusic(LoadoutBase):
    __tablename__ = 'wp_player_music'

    steamid = Column(String(18), primary_key=True)
    team = Column(Integer, primary_key=True, default=0)
    music_id = Column(Integer, nullable=False)


class PlayerPin(LoadoutBase):
    __tablename__ = 'wp_player_pins'

    steamid = Column(String(18), primary_key=True)
    team = Column(Integer, primary_key=True, default=0)
    id = Column(Integer, nullable=False)


# Cleanup order; labels are used in log lines ("Deleted 3 skin records ...")
CATEGORY_MODELS = {
    'skins': (PlayerSkin, 'skin'),
    'knives': (PlayerKnife, 'knife'),
    'gloves': (PlayerGloves, 'glove'),
    'agents': (PlayerAgent, 'agent'),
    'music': (PlayerMusic, 'music'),
    'pins': (PlayerPin, 'pin'),
}
