"""Logging helpers.

Library code never configures handlers; it only writes to a logger handed
in by the caller, which may be None. The CLI calls configure_logging() once
at startup.
"""

import logging
import sys
from typing import Optional


LOG_FORMAT = '%(asctime)s %(levelname)s %(name)s: %(message)s%(context_suffix)s'


class ContextFilter(logging.Filter):
    """Render ``extra={"context": {...}}`` fields as ``key=value`` pairs."""

    def filter(self, record: logging.LogRecord) -> bool:
        context = getattr(record, 'context', None)
        if isinstance(context, dict) and context:
            pairs = ' '.join(f'{key}={value!r}' for key, value in context.items())
            record.context_suffix = f' [{pairs}]'
        else:
            record.context_suffix = ''
        return True


def configure_logging(log_level: str = 'INFO') -> logging.Logger:
    """Install a single stderr handler on the root logger.

    Raises:
        ValueError: If log_level is not a known level name
    """
    numeric_level = getattr(logging, log_level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {log_level}")

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(numeric_level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(ContextFilter())
    root_logger.addHandler(handler)

    return root_logger


def is_debug_enabled(logger: Optional[logging.Logger]) -> bool:
    return logger is not None and logger.isEnabledFor(logging.DEBUG)


def log_with_context(
    logger: Optional[logging.Logger],
    level: int,
    message: str,
    **context_fields: object,
) -> None:
    """Log a message with structured fields; a None logger is a no-op."""
    if logger is None:
        return
    logger.log(level, message, extra={'context': context_fields})
