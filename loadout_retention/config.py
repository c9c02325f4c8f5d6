"""Cleanup configuration - env vars or the host's plugin config document."""

import logging
import os
from dataclasses import dataclass, field

log = logging.getLogger('loadout_retention')

_TRUE = {'1', 'true', 'yes', 'on'}
_FALSE = {'0', 'false', 'no', 'off'}

CATEGORIES = ('skins', 'knives', 'gloves', 'agents', 'music', 'pins')

# Host config document keys under "Additional"
_FEATURE_KEYS = {
    'skins': 'SkinEnabled',
    'knives': 'KnifeEnabled',
    'gloves': 'GloveEnabled',
    'agents': 'AgentEnabled',
    'music': 'MusicEnabled',
    'pins': 'PinsEnabled',
}


def _parse_bool(name, raw, default):
    if raw is None:
        return default
    if isinstance(raw, bool):
        return raw
    value = str(raw).strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    log.info(f"[Config] {name}={raw!r} invalid, using default {default}")
    return default


def _parse_int(name, raw, default):
    if raw is None:
        return default
    try:
        return int(raw)
    except (ValueError, TypeError):
        log.info(f"[Config] {name}={raw!r} invalid, using default {default}")
        return default


def _parse_positive_float(name, raw, default):
    if raw is None:
        return default
    try:
        value = float(raw)
    except (ValueError, TypeError):
        log.info(f"[Config] {name}={raw!r} invalid, using default {default}")
        return default
    if value <= 0:
        log.info(f"[Config] {name}={value} must be positive, using default {default}")
        return default
    return value


def _get_env_bool(name, default):
    return _parse_bool(name, os.environ.get(name), default)


def _get_env_int(name, default):
    return _parse_int(name, os.environ.get(name), default)


def _get_env_positive_float(name, default):
    return _parse_positive_float(name, os.environ.get(name), default)


@dataclass
class CleanupSettings:
    """Schedule and threshold for the inactive-player cleanup."""
    enabled: bool = False
    inactive_days: int = 30
    run_on_startup: bool = True
    interval_minutes: float = 60.0
    log_cleanup: bool = True

    @property
    def active(self):
        """True when the schedule should be registered at all."""
        return self.enabled and self.inactive_days > 0

    @property
    def interval_seconds(self):
        return self.interval_minutes * 60.0


@dataclass
class FeatureFlags:
    """Per-category switches; a disabled category is never cleaned."""
    skins: bool = True
    knives: bool = True
    gloves: bool = True
    agents: bool = True
    music: bool = True
    pins: bool = True

    def is_enabled(self, category):
        return bool(getattr(self, category))

    def enabled_categories(self):
        return [c for c in CATEGORIES if self.is_enabled(c)]


@dataclass
class RetentionConfig:
    cleanup: CleanupSettings = field(default_factory=CleanupSettings)
    features: FeatureFlags = field(default_factory=FeatureFlags)

    @classmethod
    def from_env(cls):
        """Build config from LOADOUT_* environment variables."""
        defaults = CleanupSettings()
        cleanup = CleanupSettings(
            enabled=_get_env_bool('LOADOUT_CLEANUP_ENABLED', defaults.enabled),
            inactive_days=_get_env_int('LOADOUT_CLEANUP_INACTIVE_DAYS', defaults.inactive_days),
            run_on_startup=_get_env_bool('LOADOUT_CLEANUP_RUN_ON_STARTUP', defaults.run_on_startup),
            interval_minutes=_get_env_positive_float(
                'LOADOUT_CLEANUP_INTERVAL_MINUTES', defaults.interval_minutes),
            log_cleanup=_get_env_bool('LOADOUT_CLEANUP_LOG', defaults.log_cleanup),
        )
        features = FeatureFlags(**{
            category: _get_env_bool(f'LOADOUT_{category.upper()}_ENABLED', True)
            for category in CATEGORIES
        })
        return cls(cleanup=cleanup, features=features)

    @classmethod
    def from_dict(cls, data):
        """Build config from the host plugin config document.

        Reads the ``DatabaseCleanup`` and ``Additional`` sections; missing keys
        keep their defaults.
        """
        data = data or {}
        section = data.get('DatabaseCleanup') or {}
        additional = data.get('Additional') or {}
        defaults = CleanupSettings()

        cleanup = CleanupSettings(
            enabled=_parse_bool('Enabled', section.get('Enabled'), defaults.enabled),
            inactive_days=_parse_int('InactiveDays', section.get('InactiveDays'), defaults.inactive_days),
            run_on_startup=_parse_bool('RunOnStartup', section.get('RunOnStartup'), defaults.run_on_startup),
            interval_minutes=_parse_positive_float(
                'CleanupIntervalMinutes', section.get('CleanupIntervalMinutes'), defaults.interval_minutes),
            log_cleanup=_parse_bool('LogCleanup', section.get('LogCleanup'), defaults.log_cleanup),
        )
        features = FeatureFlags(**{
            category: _parse_bool(key, additional.get(key), True)
            for category, key in _FEATURE_KEYS.items()
        })
        return cls(cleanup=cleanup, features=features)
