"""
Database configuration.

Builds the set of named connection profiles (sqlite, mysql, mysql_testing)
from environment variables. The result is read-only and is meant to be
built once at startup and passed to whatever needs a database.

DATABASE_URL, when set, takes precedence over the individual DB_* values
at connect time (used by Heroku-style hosts).
"""

import os
from dataclasses import dataclass, field
from types import MappingProxyType
from urllib.parse import quote, unquote, urlsplit

from .env import load_env
from .hostport import resolve

DEFAULT_MYSQL_PORT = 3306
REDACTED = '***'


def _freeze(value):
    if isinstance(value, dict):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    return value


def _thaw(value):
    if isinstance(value, MappingProxyType):
        return {k: _thaw(v) for k, v in value.items()}
    return value


def redact_url(url):
    """Mask the password component of a URL, if it has one."""
    if not url:
        return url
    parts = urlsplit(url)
    userinfo, sep, hostinfo = parts.netloc.rpartition('@')
    if not sep or ':' not in userinfo:
        return url
    user = userinfo.split(':', 1)[0]
    return parts._replace(netloc=f"{user}:{REDACTED}@{hostinfo}").geturl()


def _redact(profile):
    redacted = dict(profile)
    if redacted.get('password'):
        redacted['password'] = REDACTED
    if redacted.get('url'):
        redacted['url'] = redact_url(redacted['url'])
    return redacted


@dataclass(frozen=True)
class DatabaseConfig:
    """Resolved database settings: the active profile name plus all profiles."""

    default: str
    connections: MappingProxyType
    migrations: str = 'migrations'
    redis: MappingProxyType = field(default_factory=lambda: MappingProxyType({}))

    def connection(self, name=None):
        """Return the named profile, or the default one."""
        return self.connections[name or self.default]

    def as_dict(self, redact=False):
        connections = _thaw(self.connections)
        if redact:
            connections = {name: _redact(p) for name, p in connections.items()}
        return {
            'default': self.default,
            'connections': connections,
            'migrations': self.migrations,
            'redis': _thaw(self.redis),
        }


def load_config(environ=None, base_path=None):
    """
    Build the database configuration from environment variables.

    Args:
        environ: Mapping to read from (defaults to os.environ)
        base_path: Application root; the default sqlite file lives in
            <base_path>/database/database.sqlite (defaults to cwd)

    Returns:
        DatabaseConfig

    Raises:
        ValueError: If an environment value is invalid or DB_CONNECTION
            does not name a profile
    """
    env = load_env(environ)
    if base_path is None:
        base_path = os.getcwd()

    # MySQL: DB_HOST may carry its own port
    endpoint = resolve(env['DB_HOST'] or '', env['DB_PORT'])

    connections = {
        'sqlite': {
            'driver': 'sqlite',
            'url': env['DATABASE_URL'],
            'database': env['DB_DATABASE'] or os.path.join(base_path, 'database', 'database.sqlite'),
            'prefix': '',
            'foreign_key_constraints': env['DB_FOREIGN_KEYS'],
        },
        'mysql': {
            'driver': 'mysql',
            'url': env['DATABASE_URL'],
            'host': endpoint.host,
            'database': env['DB_DATABASE'] or 'forge',
            'username': env['DB_USERNAME'],
            'password': env['DB_PASSWORD'],
            'unix_socket': env['DB_SOCKET'],
            'port': endpoint.port,
            'charset': 'utf8mb4',
            'collation': 'utf8mb4_unicode_ci',
            'prefix': env['DB_TABLE_PREFIX'],
            'prefix_indexes': True,
            'strict': False,
            'engine': None,
            'options': {k: v for k, v in {'ssl_ca': env['MYSQL_ATTR_SSL_CA']}.items() if v},
        },
        'mysql_testing': {
            'driver': 'mysql',
            'url': env['TEST_DATABASE_URL'],
            'host': '127.0.0.1',
            'database': 'bookstack-test',
            'username': env['MYSQL_USER'],
            'password': env['MYSQL_PASSWORD'],
            'port': endpoint.port,
            'charset': 'utf8mb4',
            'collation': 'utf8mb4_unicode_ci',
            'prefix': '',
            'prefix_indexes': True,
            'strict': False,
        },
    }

    default = env['DB_CONNECTION']
    if default not in connections:
        raise ValueError(
            f"DB_CONNECTION must be one of {', '.join(sorted(connections))}, got {default!r}"
        )

    return DatabaseConfig(default=default, connections=_freeze(connections))


def parse_database_url(url):
    """
    Parse a DATABASE_URL into connection parameters.

    Supports mysql://, mysql+pymysql:// and sqlite:/// URLs.

    Raises:
        ValueError: For any other scheme
    """
    parsed = urlsplit(url)
    scheme = parsed.scheme.split('+', 1)[0]

    if scheme == 'sqlite':
        # sqlite:///relative.db and sqlite:////abs/path.db
        path = parsed.path[1:] if parsed.path.startswith('/') else parsed.path
        return {
            'driver': 'sqlite',
            'host': None,
            'port': None,
            'database': path,
            'username': None,
            'password': None,
        }

    if scheme == 'mysql':
        return {
            'driver': 'mysql',
            'host': parsed.hostname,
            'port': parsed.port or DEFAULT_MYSQL_PORT,
            'database': parsed.path.lstrip('/'),
            'username': unquote(parsed.username) if parsed.username else None,
            'password': unquote(parsed.password) if parsed.password else '',
        }

    raise ValueError(f"Unsupported database URL scheme: {parsed.scheme!r}")


def get_connection_params(profile):
    """
    Get connection parameters for a profile as a dict.

    Returns a dict suitable for pymysql.connect(**params), or
    {'database': path} for sqlite. A profile url overrides the
    discrete settings.
    """
    driver = profile['driver']
    url = parse_database_url(profile['url']) if profile.get('url') else None
    if url and url['driver'] != driver:
        raise ValueError(
            f"Database URL is for {url['driver']} but the connection uses {driver}"
        )

    if driver == 'sqlite':
        return {'database': url['database'] if url else profile['database']}

    if driver != 'mysql':
        raise ValueError(f"Unsupported database driver: {driver}")

    params = {
        'host': profile['host'],
        'port': profile['port'],
        'user': profile['username'],
        'password': profile['password'],
        'database': profile['database'],
        'charset': profile['charset'],
    }
    if url:
        params.update({
            'host': url['host'],
            'port': url['port'],
            'user': url['username'],
            'password': url['password'],
            'database': url['database'],
        })
    if profile.get('unix_socket'):
        params['unix_socket'] = profile['unix_socket']
    ssl_ca = profile.get('options', {}).get('ssl_ca')
    if ssl_ca:
        params['ssl'] = {'ca': ssl_ca}
    return params


def get_connection_string(profile):
    """
    Get a SQLAlchemy-style connection string for a profile.

    A profile url is returned as-is.
    """
    if profile.get('url'):
        return profile['url']

    if profile['driver'] == 'sqlite':
        return f"sqlite:///{profile['database']}"

    if profile['driver'] != 'mysql':
        raise ValueError(f"Unsupported database driver: {profile['driver']}")

    host = profile['host']
    if ':' in host and not host.startswith('['):
        host = f"[{host}]"
    user = quote(profile['username'] or '', safe='')
    if profile['password']:
        password = quote(profile['password'], safe='')
        return f"mysql+pymysql://{user}:{password}@{host}:{profile['port']}/{profile['database']}"
    else:
        return f"mysql+pymysql://{user}@{host}:{profile['port']}/{profile['database']}"
