"""Startup validation of server encoding and locale settings."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

import asyncpg

from ..exceptions import (
    StartupValidationError,
    UnsupportedEncodingError,
    UnsupportedLocaleError,
    ValidationIOError,
)
from ..models.connection import SettingObservation
from ..utils.locale_utils import is_acceptable_utf8_locale
from ..utils.log_utils import is_debug_enabled, log_with_context


OP_NAME = 'pgboot.validate'

# Same rows as SHOW ALL: (name, setting, description).
SETTINGS_QUERY = "SELECT name, setting, short_desc FROM pg_catalog.pg_settings"

ENCODING_UTF8 = 'UTF8'

# Standard locales, see https://www.gnu.org/software/libc/manual/html_node/Standard-Locales.html
LOCALE_C = 'C'
LOCALE_POSIX = 'POSIX'

# Errors the driver raises for a failed query or a dropped connection.
DRIVER_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError)


@dataclass(frozen=True)
class SettingRule:
    """Check for a single server setting."""

    accepts: Callable[[str], bool]
    error: Callable[[str, str], StartupValidationError]


def encoding_rule(want: str) -> SettingRule:
    """Exact, case-sensitive match against a single encoding."""
    return SettingRule(
        accepts=lambda setting: setting == want,
        error=lambda name, got: UnsupportedEncodingError(OP_NAME, name, got, want),
    )


def locale_rule() -> SettingRule:
    """C, POSIX, or an accepted en_US UTF-8 spelling."""
    return SettingRule(
        accepts=lambda setting: (
            setting in (LOCALE_C, LOCALE_POSIX) or is_acceptable_utf8_locale(setting)
        ),
        error=lambda name, got: UnsupportedLocaleError(OP_NAME, name, got),
    )


# Settings not listed here are ignored.
SETTING_RULES: Dict[str, SettingRule] = {
    'server_encoding': encoding_rule(ENCODING_UTF8),
    'client_encoding': encoding_rule(ENCODING_UTF8),
    'lc_collate': locale_rule(),
    'lc_ctype': locale_rule(),
}


def check_setting(
    observation: SettingObservation,
    rules: Dict[str, SettingRule] = SETTING_RULES,
) -> bool:
    """
    Check one observed setting against the rules.

    Returns:
        True if a rule matched and accepted the value, False if no rule
        applies to this setting

    Raises:
        StartupValidationError: If a rule rejects the value
    """
    rule = rules.get(observation.name)
    if rule is None:
        return False
    if not rule.accepts(observation.value):
        raise rule.error(observation.name, observation.value)
    return True


async def validate(
    pool,
    logger: Optional[logging.Logger] = None,
    rules: Dict[str, SettingRule] = SETTING_RULES,
) -> List[SettingObservation]:
    """
    Read the server's runtime settings and check them against the rules.

    The connection, its read-only transaction and the cursor are scoped by
    ``async with``, so they are released on success, on a rejected setting
    and on a driver error alike.

    Args:
        pool: Anything with an asyncpg-style ``acquire()``
        logger: Optional logger; accepted settings are logged at DEBUG
        rules: Setting name to rule mapping

    Returns:
        The accepted observations, in server order

    Raises:
        UnsupportedEncodingError: If an encoding setting is not UTF8
        UnsupportedLocaleError: If a locale setting is not accepted
        ValidationIOError: If the query or row iteration fails
    """
    debug = is_debug_enabled(logger)
    accepted: List[SettingObservation] = []

    try:
        async with pool.acquire() as conn:
            async with conn.transaction(readonly=True):
                async for record in conn.cursor(SETTINGS_QUERY):
                    observation = _scan(record)
                    if not check_setting(observation, rules):
                        continue
                    accepted.append(observation)
                    if debug:
                        log_with_context(
                            logger, logging.DEBUG, "PostgreSQL setting",
                            name=observation.name, setting=observation.value,
                        )
    except DRIVER_ERRORS as e:
        raise ValidationIOError(OP_NAME, f"reading server settings: {e}") from e

    return accepted


def _scan(record) -> SettingObservation:
    try:
        name = record['name']
        setting = record['setting']
        description = record['short_desc']
    except (KeyError, IndexError, TypeError) as e:
        raise ValidationIOError(OP_NAME, f"malformed settings row: {e}") from e

    if not isinstance(name, str) or not isinstance(setting, str):
        raise ValidationIOError(OP_NAME, f"malformed settings row {name!r}: {setting!r}")

    return SettingObservation(name=name, value=setting, description=description)
