"""Connection pool construction and startup checks."""

import logging
from typing import Any, Dict, List, Optional

import asyncpg

from ..exceptions import PoolConstructionError
from ..models.connection import ConnectionConfig, SettingObservation
from ..utils.log_utils import is_debug_enabled, log_with_context
from .session import build_connection_config
from .validation import validate


OP_NAME = 'pgboot.open_pool'


class Pool:
    """A configured asyncpg pool.

    Safe for concurrent use by many tasks; asyncpg handles acquisition and
    release of individual connections. A pool opened eagerly is validated
    before it is returned. A lazy pool stays unvalidated until
    ``validate()`` is called.
    """

    def __init__(
        self,
        pool: asyncpg.Pool,
        config: ConnectionConfig,
        logger: Optional[logging.Logger] = None
    ):
        self._pool = pool
        self._config = config
        self._logger = logger
        self._validated = False
        self._observations: List[SettingObservation] = []

    @property
    def config(self) -> ConnectionConfig:
        return self._config

    @property
    def validated(self) -> bool:
        return self._validated

    @property
    def observations(self) -> List[SettingObservation]:
        """Settings accepted by the last successful validation."""
        return list(self._observations)

    def acquire(self, *, timeout: Optional[float] = None):
        """Acquire a connection; use as ``async with pool.acquire() as conn``."""
        return self._pool.acquire(timeout=timeout)

    async def fetch(self, query: str, *args, timeout: Optional[float] = None) -> List[Any]:
        return await self._pool.fetch(query, *args, timeout=timeout)

    async def fetchrow(self, query: str, *args, timeout: Optional[float] = None) -> Optional[Any]:
        return await self._pool.fetchrow(query, *args, timeout=timeout)

    async def fetchval(self, query: str, *args, column: int = 0, timeout: Optional[float] = None) -> Any:
        return await self._pool.fetchval(query, *args, column=column, timeout=timeout)

    async def execute(self, query: str, *args, timeout: Optional[float] = None) -> str:
        return await self._pool.execute(query, *args, timeout=timeout)

    async def validate(self) -> List[SettingObservation]:
        """Check server encoding and locale settings.

        Read-only, so calling it again is harmless, but it repeats the query.
        """
        self._validated = False
        self._observations = []
        observations = await validate(self, self._logger)
        self._observations = observations
        self._validated = True
        return observations

    async def close(self) -> None:
        await self._pool.close()

    async def __aenter__(self) -> 'Pool':
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()


async def open_pool(
    connection_string: str,
    lazy: bool = False,
    logger: Optional[logging.Logger] = None,
    min_size: Optional[int] = None,
    max_size: Optional[int] = None,
) -> Pool:
    """
    Open a connection pool with the forced session configuration.

    Unless lazy, the server's encoding and locale settings are validated
    before returning, and the pool is closed again if validation fails.
    A lazy pool opens no connection and issues no query until first use.

    Args:
        connection_string: PostgreSQL URL or keyword/value string
        lazy: Defer connecting and validation
        logger: Optional logger; at DEBUG every statement is logged too
        min_size: Minimum pool size; an eager pool always opens at least one
        max_size: Maximum pool size

    Returns:
        Ready Pool

    Raises:
        ConfigParseError: If the connection string is malformed
        PoolConstructionError: If the pool cannot be created
        StartupValidationError: If the server fails validation
    """
    config = build_connection_config(
        connection_string, lazy=lazy, min_size=min_size, max_size=max_size
    )

    try:
        raw_pool = await asyncpg.create_pool(**_pool_kwargs(config, logger))
    except Exception as e:
        raise PoolConstructionError(OP_NAME, f"connecting to {config.safe_dsn()}: {e}") from e

    pool = Pool(raw_pool, config, logger)

    if not lazy:
        try:
            await pool.validate()
        except BaseException:
            try:
                await pool.close()
            except Exception as close_error:
                log_with_context(
                    logger, logging.WARNING, "Failed to close pool after validation error",
                    error=str(close_error),
                )
            raise

    log_with_context(
        logger, logging.INFO, "PostgreSQL pool ready",
        dsn=config.safe_dsn(), lazy=lazy, validated=pool.validated,
    )
    return pool


def _pool_kwargs(config: ConnectionConfig, logger: Optional[logging.Logger]) -> Dict[str, Any]:
    kwargs: Dict[str, Any] = {
        'host': config.host,
        'port': config.port,
        'user': config.user,
        'password': config.password,
        'database': config.database,
        'server_settings': config.server_settings(),
        # A lazy pool must not connect while it is being created; an eager one
        # connects at least once so unreachable servers fail construction.
        'min_size': 0 if config.lazy else max(config.min_size, 1),
        'max_size': config.max_size,
    }
    if config.ssl is not None:
        kwargs['ssl'] = config.ssl
    if config.connect_timeout is not None:
        kwargs['timeout'] = config.connect_timeout
    if is_debug_enabled(logger):
        kwargs['init'] = _query_logging_init(logger.getChild('pgconn'))
    return kwargs


def _query_logging_init(logger: logging.Logger):
    """Build a per-connection init hook that logs every statement at DEBUG."""

    def log_query(record) -> None:
        context = {'query': record.query, 'elapsed': record.elapsed}
        if record.exception is not None:
            context['error'] = str(record.exception)
        logger.debug("Query", extra={'context': context})

    async def init(conn) -> None:
        conn.add_query_logger(log_query)

    return init
