"""Command-line interface commands."""

import asyncio
import logging
import sys
from typing import Optional

import click

from ..config import app_config, db_config
from ..database import build_connection_config, open_pool
from ..exceptions import PgBootError
from ..utils.log_utils import configure_logging


@click.group()
@click.option('--log-level', default=None, help='Log level (default: LOG_LEVEL or INFO)')
def main(log_level: Optional[str]):
    """pgboot CLI - open and check a PostgreSQL connection pool."""
    level = log_level or ('DEBUG' if app_config.debug else app_config.log_level)
    try:
        configure_logging(level)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint='--log-level')


@main.command()
@click.option('--dsn', type=str, help='Connection string (default: DATABASE_URL or DB_* variables)')
@click.option('--lazy/--eager', default=None, help='Skip the startup settings check')
@click.option('--min-size', type=int, help='Minimum pool size')
@click.option('--max-size', type=int, help='Maximum pool size')
def check(dsn: Optional[str], lazy: Optional[bool], min_size: Optional[int], max_size: Optional[int]):
    """Open the pool and check server encoding and locale."""
    if lazy is None:
        lazy = db_config.lazy
    asyncio.run(_check(dsn or db_config.dsn, lazy, min_size, max_size))


async def _check(dsn: str, lazy: bool, min_size: Optional[int], max_size: Optional[int]):
    """Open the pool, report accepted settings, close it."""
    logger = logging.getLogger('pgboot')
    try:
        pool = await open_pool(
            dsn, lazy=lazy, logger=logger, min_size=min_size, max_size=max_size
        )
    except PgBootError as e:
        click.echo(f"❌ {e}", err=True)
        sys.exit(1)

    async with pool:
        click.echo(f"🔌 Pool ready for {pool.config.safe_dsn()}")
        if lazy:
            click.echo("⏸️  Lazy pool: server settings not checked")
            return

        for observation in pool.observations:
            click.echo(f"   {observation.name} = {observation.value}")
        click.echo("✅ Server settings OK")


@main.command('show-config')
@click.option('--dsn', type=str, help='Connection string (default: DATABASE_URL or DB_* variables)')
@click.option('--min-size', type=int, help='Minimum pool size')
@click.option('--max-size', type=int, help='Maximum pool size')
def show_config(dsn: Optional[str], min_size: Optional[int], max_size: Optional[int]):
    """Print the derived connection configuration without connecting."""
    try:
        config = build_connection_config(
            dsn or db_config.dsn, lazy=db_config.lazy, min_size=min_size, max_size=max_size
        )
    except PgBootError as e:
        click.echo(f"❌ {e}", err=True)
        sys.exit(1)

    click.echo(f"📋 {config.safe_dsn()}")
    click.echo(f"   Pool size: {config.min_size}-{config.max_size}")
    click.echo(f"   Lazy: {config.lazy}")
    if config.ssl:
        click.echo(f"   SSL mode: {config.ssl}")
    if config.connect_timeout:
        click.echo(f"   Connect timeout: {config.connect_timeout:g}s")
    click.echo("   Session parameters:")
    for name in sorted(config.runtime_params):
        click.echo(f"      {name} = {config.runtime_params[name]!r}")
