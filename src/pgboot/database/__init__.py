"""Database connection management."""

from .pool import Pool, open_pool
from .session import APPLICATION_NAME, SESSION_OVERRIDES, build_connection_config
from .validation import SETTING_RULES, SettingRule, validate

__all__ = [
    'Pool',
    'open_pool',
    'validate',
    'build_connection_config',
    'APPLICATION_NAME',
    'SESSION_OVERRIDES',
    'SETTING_RULES',
    'SettingRule',
]
