"""Locale utilities for server settings checks."""


# Accepted spellings of the en_US UTF-8 locale, compared lowercased.
# Kept deliberately narrow: this is an allow-list, not a UTF-8 detector.
ACCEPTED_UTF8_LOCALES = frozenset({
    'en_us.utf8',
    'en_us.utf-8',
})


def is_acceptable_utf8_locale(setting: str) -> bool:
    """
    Check whether a locale setting is an accepted en_US UTF-8 spelling.

    Matching is case-insensitive and tolerates both the hyphenated and
    non-hyphenated suffix. Other languages or regions are rejected even
    when they are UTF-8.

    Args:
        setting: Locale string as reported by the server

    Returns:
        True if the locale is accepted

    Example:
        >>> is_acceptable_utf8_locale("en_US.UTF-8")
        True
        >>> is_acceptable_utf8_locale("fr_FR.utf8")
        False
    """
    return setting.lower() in ACCEPTED_UTF8_LOCALES
