"""Connection string parsing and forced session configuration."""

import os
from typing import Dict, Optional

import psycopg
from psycopg.conninfo import conninfo_to_dict

from ..exceptions import ConfigParseError
from ..models.connection import ConnectionConfig


OP_NAME = 'pgboot.build_connection_config'

APPLICATION_NAME = 'pgboot'

# Applied to every connection regardless of what the connection string says.
# search_path is empty so every query has to schema-qualify its names.
SESSION_OVERRIDES = {
    'timezone': 'UTC',
    'application_name': APPLICATION_NAME,
    'search_path': '',
}

SSL_MODES = ('disable', 'allow', 'prefer', 'require', 'verify-ca', 'verify-full')

# libpq keys sent to the server as startup parameters. Other libpq keys that
# are not connection fields below are client-side only and are not used.
RUNTIME_KEYS = ('options', 'client_encoding', 'application_name')

# libpq environment fallbacks, lowest precedence.
ENV_KEYS = {
    'PGHOST': 'host',
    'PGPORT': 'port',
    'PGUSER': 'user',
    'PGPASSWORD': 'password',
    'PGDATABASE': 'dbname',
    'PGSSLMODE': 'sslmode',
    'PGCONNECT_TIMEOUT': 'connect_timeout',
}


def build_connection_config(
    connection_string: str,
    lazy: bool = False,
    min_size: Optional[int] = None,
    max_size: Optional[int] = None,
) -> ConnectionConfig:
    """
    Build a ConnectionConfig from a PostgreSQL connection string.

    Both libpq forms are accepted: the URL form
    (``postgresql://user:pw@host:5432/db?sslmode=require``) and the
    keyword/value form (``host=db port=5432 dbname=app``). Session
    parameters can be passed with libpq's ``options`` key
    (``options='-c statement_timeout=5000'``). The session overrides in
    SESSION_OVERRIDES are applied last, so they always win.

    Args:
        connection_string: Raw connection string
        lazy: Whether connections should be deferred until first use
        min_size: Minimum pool size (default 1)
        max_size: Maximum pool size (default 10)

    Returns:
        Immutable ConnectionConfig

    Raises:
        ConfigParseError: If the string is malformed
    """
    if not connection_string or not connection_string.strip():
        raise ConfigParseError(OP_NAME, "empty connection string")

    try:
        params = conninfo_to_dict(connection_string)
    except psycopg.ProgrammingError as e:
        raise ConfigParseError(OP_NAME, str(e).strip()) from e

    merged = _environment_defaults()
    merged.update(params)

    runtime_params = {
        key: merged[key] for key in RUNTIME_KEYS if key in merged
    }
    runtime_params.update(SESSION_OVERRIDES)

    user = merged.get('user') or 'postgres'

    fields = {
        'host': merged.get('host') or 'localhost',
        'port': _parse_port(merged.get('port')),
        'user': user,
        'password': merged.get('password'),
        'database': merged.get('dbname') or user,
        'ssl': _parse_sslmode(merged.get('sslmode')),
        'connect_timeout': _parse_timeout(merged.get('connect_timeout')),
        'runtime_params': runtime_params,
        'lazy': lazy,
    }
    if min_size is not None:
        fields['min_size'] = min_size
    if max_size is not None:
        fields['max_size'] = max_size

    resolved_min = fields.get('min_size', ConnectionConfig.model_fields['min_size'].default)
    resolved_max = fields.get('max_size', ConnectionConfig.model_fields['max_size'].default)
    if resolved_max < 1:
        raise ConfigParseError(OP_NAME, f"max_size must be at least 1, got {resolved_max}")
    if resolved_min < 0:
        raise ConfigParseError(OP_NAME, f"min_size must not be negative, got {resolved_min}")
    if resolved_min > resolved_max:
        raise ConfigParseError(
            OP_NAME,
            f"min_size ({resolved_min}) is greater than max_size ({resolved_max})"
        )

    return ConnectionConfig(**fields)


def _environment_defaults() -> Dict[str, str]:
    defaults = {}
    for env_name, key in ENV_KEYS.items():
        value = os.getenv(env_name)
        if value:
            defaults[key] = value
    return defaults


def _parse_port(value: Optional[str]) -> int:
    if not value:
        return 5432
    try:
        port = int(value)
    except ValueError as e:
        raise ConfigParseError(OP_NAME, f"invalid port {value!r}") from e
    if not 0 < port < 65536:
        raise ConfigParseError(OP_NAME, f"invalid port {value!r}")
    return port


def _parse_timeout(value: Optional[str]) -> Optional[float]:
    if not value:
        return None
    try:
        seconds = int(value)
    except ValueError as e:
        raise ConfigParseError(OP_NAME, f"invalid connect_timeout {value!r}") from e
    if seconds < 0:
        raise ConfigParseError(OP_NAME, f"invalid connect_timeout {value!r}")
    return float(seconds) if seconds else None


def _parse_sslmode(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    if value not in SSL_MODES:
        raise ConfigParseError(OP_NAME, f"unsupported sslmode {value!r}")
    return value
