"""Flask diagnostics service for the database settings."""

import os
import sys

# Add project root to path for dbsettings imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(__file__))))

from flask import Flask, jsonify
from dbsettings import load_config, check_connection

app = Flask(__name__)
# Resolved once at startup; tests swap this out
app.config['DATABASE'] = load_config()


@app.route('/health')
def health():
    """Health check endpoint for Cloud Run."""
    return 'OK', 200


@app.route('/health/db')
def health_db():
    """Check that the default connection profile can be reached."""
    try:
        check_connection(app.config['DATABASE'])
    except Exception as e:
        return f'DB ERROR: {e}', 503
    return 'OK', 200


@app.route('/config')
def show_config():
    """Resolved configuration with passwords masked."""
    return jsonify(app.config['DATABASE'].as_dict(redact=True))


if __name__ == '__main__':
    port = int(os.environ.get('PORT', 5000))
    debug = os.environ.get('FLASK_DEBUG', 'true').lower() == 'true'
    app.run(host='0.0.0.0', port=port, debug=debug)
