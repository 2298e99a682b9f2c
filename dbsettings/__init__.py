"""Database connection settings resolved from environment variables."""

from .hostport import ConnectionEndpoint, parse_port, resolve
from .env import ENV_VARS, EnvVar, get_env, load_env
from .config import (
    DatabaseConfig,
    load_config,
    parse_database_url,
    get_connection_params,
    get_connection_string,
    redact_url,
)
from .connection import get_connection, check_connection
