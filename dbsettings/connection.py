"""
Database connection utilities.

Opens a driver connection for a configured profile: PyMySQL for mysql
profiles, sqlite3 for sqlite ones.
"""

import sqlite3

import pymysql

from .config import get_connection_params


def get_connection(config, name=None):
    """
    Get a database connection for a profile.

    Args:
        config: DatabaseConfig
        name: Profile name (defaults to config.default)

    Returns:
        A pymysql or sqlite3 connection object
    """
    profile = config.connection(name)
    params = get_connection_params(profile)

    if profile['driver'] == 'sqlite':
        conn = sqlite3.connect(params['database'])
        if profile.get('foreign_key_constraints'):
            conn.execute('PRAGMA foreign_keys = ON')
        return conn

    return pymysql.connect(**params)


def check_connection(config, name=None):
    """Open a connection, run SELECT 1 and close it. Driver errors propagate."""
    conn = get_connection(config, name)
    try:
        cur = conn.cursor()
        try:
            cur.execute('SELECT 1')
            cur.fetchone()
        finally:
            cur.close()
        return True
    finally:
        conn.close()
