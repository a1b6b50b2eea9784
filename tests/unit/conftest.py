"""Shared fixtures: in-memory stand-ins for the asyncpg pool."""

from types import SimpleNamespace
import pytest


def settings_rows(**settings):
    """Build pg_settings rows from name=value pairs."""
    return [
        {'name': name, 'setting': value, 'short_desc': f"{name} description"}
        for name, value in settings.items()
    ]


GOOD_SETTINGS = {
    'application_name': 'pgboot',
    'server_encoding': 'UTF8',
    'client_encoding': 'UTF8',
    'lc_collate': 'C',
    'lc_ctype': 'POSIX',
    'TimeZone': 'UTC',
}


class FakeCursor:
    """Async iterable over rows; optionally raises after the last row."""

    def __init__(self, rows, error=None):
        self._rows = rows
        self._error = error

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for row in self._rows:
            yield row
        if self._error is not None:
            raise self._error


class FakeTransaction:

    def __init__(self, options):
        self.options = options
        self.entered = False
        self.exited = False

    async def __aenter__(self):
        self.entered = True
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.exited = True
        return False


class FakeConnection:

    def __init__(self, rows, error=None):
        self.rows = rows
        self.error = error
        self.queries = []
        self.transactions = []

    def transaction(self, **options):
        transaction = FakeTransaction(options)
        self.transactions.append(transaction)
        return transaction

    def cursor(self, query, *args):
        self.queries.append(query)
        return FakeCursor(self.rows, self.error)


class FakeAcquireContext:

    def __init__(self, pool):
        self._pool = pool

    async def __aenter__(self):
        if self._pool.acquire_error is not None:
            raise self._pool.acquire_error
        self._pool.acquired += 1
        return self._pool.connection

    async def __aexit__(self, exc_type, exc, tb):
        self._pool.released += 1
        return False


class FakePool:
    """Minimal asyncpg.Pool replacement."""

    def __init__(self, rows=(), error=None, acquire_error=None, close_error=None):
        self.connection = FakeConnection(list(rows), error)
        self.acquire_error = acquire_error
        self.close_error = close_error
        self.acquired = 0
        self.released = 0
        self.closed = False

    @property
    def queries(self):
        return self.connection.queries

    def acquire(self, timeout=None):
        return FakeAcquireContext(self)

    async def fetchval(self, query, *args, column=0, timeout=None):
        self.connection.queries.append(query)
        return 1

    async def close(self):
        self.closed = True
        if self.close_error is not None:
            raise self.close_error


@pytest.fixture(autouse=True)
def clean_pg_environment(monkeypatch):
    """Keep libpq environment variables from leaking into parsing."""
    for name in ('PGHOST', 'PGPORT', 'PGUSER', 'PGPASSWORD', 'PGDATABASE',
                 'PGSSLMODE', 'PGCONNECT_TIMEOUT'):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def make_pool():
    """Factory for FakePool instances."""
    def _make(settings=None, rows=None, error=None, acquire_error=None):
        if rows is None:
            rows = settings_rows(**(GOOD_SETTINGS if settings is None else settings))
        return FakePool(rows=rows, error=error, acquire_error=acquire_error)
    return _make


@pytest.fixture
def fake_driver(monkeypatch, make_pool):
    """Replace asyncpg.create_pool with a recorder returning a FakePool."""
    state = SimpleNamespace(calls=[], pool=make_pool(), error=None)

    async def create_pool(**kwargs):
        state.calls.append(kwargs)
        if state.error is not None:
            raise state.error
        return state.pool

    monkeypatch.setattr('asyncpg.create_pool', create_pool)
    return state
