"""
edix12 exceptions.

Messages are %-style templates filled from a dict (preferred) or from keyword arguments:
    raise ConfigurationError('No spec for transaction set "%(doc)s".', {'doc': '850'})
    raise ConfigurationError('No spec for transaction set "%(doc)s".', doc='850')
Formatting an error never raises: unknown placeholders render as '', values of any
type or charset are converted to text.
"""
# pylint: disable=missing-class-docstring, broad-exception-caught

import collections

_CHARSETS = ('utf_8', 'latin_1')


def safe_unicode(value):
    """text for value; bytes are tried as utf-8, then latin-1. Never raises."""
    try:
        if isinstance(value, str):
            return value
        if isinstance(value, bytes):
            for charset in _CHARSETS:
                try:
                    return value.decode(charset)
                except UnicodeDecodeError:
                    continue
            return value.decode('utf_8', 'ignore')
        return str(value)
    except Exception:
        try:
            return repr(value)
        except Exception:
            return '<value can not be displayed>'


class X12Error(Exception):
    """Root of all edix12 errors."""

    def __init__(self, exc, *args, **kwargs):
        self.exc = safe_unicode(exc)
        self.xxx = collections.defaultdict(str)
        # args[0] is expected to be a dict; other values give no parameters
        params = args[0] if args else kwargs
        if isinstance(params, dict):
            for key, value in params.items():
                self.xxx[safe_unicode(key)] = safe_unicode(value)

    def __str__(self):
        try:
            return self.exc % self.xxx
        except Exception:
            # template has a format code that does not fit its value
            return self.exc


class ConfigurationError(X12Error):
    """codec can not be set up or can not proceed without more configuration"""


class GrammarError(ConfigurationError):
    """schema document is malformed"""


class TreeFormatError(X12Error):
    """input for encoding is not a record tree"""
