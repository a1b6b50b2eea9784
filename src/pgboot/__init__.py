"""Startup-time PostgreSQL connection pool with session and server checks."""

from .database import Pool, build_connection_config, open_pool, validate
from .exceptions import (
    ConfigParseError,
    PgBootError,
    PoolConstructionError,
    StartupValidationError,
    UnsupportedEncodingError,
    UnsupportedLocaleError,
    ValidationIOError,
)
from .models import ConnectionConfig, SettingObservation
from .utils import is_acceptable_utf8_locale

__all__ = [
    'Pool',
    'open_pool',
    'validate',
    'build_connection_config',
    'is_acceptable_utf8_locale',
    'ConnectionConfig',
    'SettingObservation',
    'PgBootError',
    'ConfigParseError',
    'PoolConstructionError',
    'StartupValidationError',
    'UnsupportedEncodingError',
    'UnsupportedLocaleError',
    'ValidationIOError',
]
