"""
Exception hierarchy for pgboot.

Every error carries the name of the operation that raised it (``op``) and
chains the original exception as ``__cause__``, so callers can tell
"could not reach the server" apart from "reached it, but it is
misconfigured". All of them are fatal to startup.
"""


class PgBootError(Exception):
    """Base exception for all pgboot errors."""

    def __init__(self, op: str, message: str):
        self.op = op
        super().__init__(f"{op}: {message}")


class ConfigParseError(PgBootError):
    """Raised when a connection string cannot be parsed."""


class PoolConstructionError(PgBootError):
    """Raised when the underlying connection pool cannot be created."""


class StartupValidationError(PgBootError):
    """Raised when the server fails the startup settings check."""


class UnsupportedEncodingError(StartupValidationError):
    """Raised when an encoding setting is not the required one.

    Attributes:
        name: Setting name, e.g. ``server_encoding``.
        got: Value reported by the server.
        want: Required value.
    """

    def __init__(self, op: str, name: str, got: str, want: str):
        self.name = name
        self.got = got
        self.want = want
        super().__init__(op, f"{name!r} is {got!r}, want {want!r}")


class UnsupportedLocaleError(StartupValidationError):
    """Raised when a locale setting is outside the accepted set.

    Attributes:
        name: Setting name, e.g. ``lc_collate``.
        got: Value reported by the server.
    """

    def __init__(self, op: str, name: str, got: str):
        self.name = name
        self.got = got
        super().__init__(op, f"{name!r} is {got!r}")


class ValidationIOError(StartupValidationError):
    """Raised when the settings query fails or its rows cannot be read."""
