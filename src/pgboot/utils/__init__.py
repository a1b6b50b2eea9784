"""pgboot utilities."""

from .locale_utils import is_acceptable_utf8_locale
from .log_utils import configure_logging, log_with_context

__all__ = ['is_acceptable_utf8_locale', 'configure_logging', 'log_with_context']
