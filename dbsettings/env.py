"""
Environment variables consumed by the database configuration.

Each entry declares its name, default and type. load_env() reads them all
once and coerces/validates the values, so a bad DB_PORT fails at startup
rather than on first connect.
"""

import os
from collections import namedtuple

EnvVar = namedtuple('EnvVar', ['name', 'default', 'type'])

ENV_VARS = (
    EnvVar('DB_CONNECTION', 'mysql', str),
    EnvVar('DB_HOST', 'localhost', str),
    EnvVar('DB_PORT', 3306, int),
    EnvVar('DB_DATABASE', None, str),  # driver-specific default, see config.py
    EnvVar('DB_USERNAME', 'forge', str),
    EnvVar('DB_PASSWORD', '', str),
    EnvVar('DB_SOCKET', '', str),
    EnvVar('DB_TABLE_PREFIX', '', str),
    EnvVar('DB_FOREIGN_KEYS', True, bool),
    EnvVar('DATABASE_URL', None, str),
    EnvVar('MYSQL_ATTR_SSL_CA', None, str),
    # mysql_testing profile
    EnvVar('TEST_DATABASE_URL', None, str),
    EnvVar('MYSQL_USER', 'bookstack-test', str),
    EnvVar('MYSQL_PASSWORD', 'bookstack-test', str),
)

# Keyword values understood in .env files, matched case-insensitively
_KEYWORDS = {
    'true': True,
    '(true)': True,
    'false': False,
    '(false)': False,
    'empty': '',
    '(empty)': '',
    'null': None,
    '(null)': None,
}

_TRUTHY = ('1', 'yes', 'on')
_FALSY = ('0', 'no', 'off', '')


def _normalize(var, raw):
    """Apply keyword and quote handling to a raw environment string."""
    lowered = raw.lower()
    if lowered in _KEYWORDS:
        keyword = _KEYWORDS[lowered]
        # String variables keep "True"/"false" as typed
        if var.type is not str or not isinstance(keyword, bool):
            return keyword
    if len(raw) > 1 and raw.startswith('"') and raw.endswith('"'):
        return raw[1:-1]
    return raw


def _coerce(var, value):
    if value is None:
        return var.default if var.type is not str else None

    if var.type is bool:
        if isinstance(value, bool):
            return value
        lowered = value.strip().lower()
        if lowered in _TRUTHY:
            return True
        if lowered in _FALSY:
            return False
        raise ValueError(f"{var.name} must be a boolean, got {value!r}")

    if var.type is int:
        if isinstance(value, bool):
            raise ValueError(f"{var.name} must be an integer, got {value!r}")
        try:
            return int(value.strip())
        except ValueError:
            raise ValueError(f"{var.name} must be an integer, got {value!r}") from None

    return value


def get_env(var, environ=None):
    """
    Read and coerce a single environment variable.

    Args:
        var: EnvVar entry
        environ: Mapping to read from (defaults to os.environ)

    Returns:
        Coerced value, or the entry's default when unset
    """
    if environ is None:
        environ = os.environ
    raw = environ.get(var.name)
    if raw is None:
        return var.default
    return _coerce(var, _normalize(var, raw))


def load_env(environ=None):
    """
    Read every entry in ENV_VARS.

    Returns:
        Dict of variable name -> coerced value

    Raises:
        ValueError: If a typed variable holds an invalid value
    """
    if environ is None:
        environ = os.environ
    return {var.name: get_env(var, environ) for var in ENV_VARS}
