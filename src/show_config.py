#!/usr/bin/env python3
"""
Print the resolved database configuration.

Reads DB_* environment variables, resolves the selected connection
profile and prints it with passwords masked. With --check, also opens a
connection to verify the settings.
"""

import argparse
import json
import os
import sys

# Add project root to path for dbsettings imports
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from dbsettings import load_config, check_connection, get_connection_string, redact_url


def main(argv=None):
    parser = argparse.ArgumentParser(description="Show resolved database settings")
    parser.add_argument("--connection", help="Profile name (defaults to DB_CONNECTION)")
    parser.add_argument("--json", action="store_true", help="Print the whole configuration as JSON")
    parser.add_argument("--check", action="store_true", help="Open a connection to verify the settings")
    args = parser.parse_args(argv)

    try:
        config = load_config()
    except ValueError as e:
        print(f"Configuration error: {e}")
        return 1

    name = args.connection or config.default
    if name not in config.connections:
        print(f"Unknown connection: {name}")
        return 1

    if args.json:
        print(json.dumps(config.as_dict(redact=True), indent=2))
    else:
        profile = config.as_dict(redact=True)['connections'][name]
        print(f"Connection: {name}{' (default)' if name == config.default else ''}")
        print(f"  URL: {redact_url(get_connection_string(config.connection(name)))}")
        for key, value in profile.items():
            print(f"  {key}: {value}")

    if args.check:
        print(f"\nConnecting to {name}...")
        try:
            check_connection(config, name)
        except Exception as e:
            print(f"  Connection failed: {e}")
            return 1
        print("  Connection OK")

    return 0


if __name__ == "__main__":
    sys.exit(main())
