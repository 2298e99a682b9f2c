import sys
sys.path.insert(0, '.')

import pytest
from dbsettings.config import load_config
from src.services.web import app


@pytest.fixture
def client():
    app.config['TESTING'] = True
    return app.test_client()


def test_health(client):
    """Health endpoint always answers OK."""
    response = client.get('/health')
    assert response.status_code == 200
    assert response.data == b'OK'


def test_health_db_ok(client, tmp_path, monkeypatch):
    """Database health is OK when the profile is reachable."""
    config = load_config({'DB_CONNECTION': 'sqlite', 'DB_DATABASE': str(tmp_path / 'web.sqlite')})
    monkeypatch.setitem(app.config, 'DATABASE', config)
    response = client.get('/health/db')
    assert response.status_code == 200


def test_health_db_unreachable(client, tmp_path, monkeypatch):
    """Database health reports 503 when a connection cannot be opened."""
    missing = tmp_path / 'no-such-dir' / 'web.sqlite'
    config = load_config({'DB_CONNECTION': 'sqlite', 'DB_DATABASE': str(missing)})
    monkeypatch.setitem(app.config, 'DATABASE', config)
    response = client.get('/health/db')
    assert response.status_code == 503
    assert response.data.startswith(b'DB ERROR')


def test_config_is_redacted(client, monkeypatch):
    """The config endpoint masks passwords."""
    config = load_config({'DB_HOST': 'db:3307', 'DB_PASSWORD': 'hunter2'})
    monkeypatch.setitem(app.config, 'DATABASE', config)
    data = client.get('/config').get_json()
    assert data['default'] == 'mysql'
    assert data['connections']['mysql']['host'] == 'db'
    assert data['connections']['mysql']['port'] == 3307
    assert data['connections']['mysql']['password'] == '***'
    assert 'hunter2' not in str(data)


def test_root_not_routed(client):
    """Only the health and config endpoints are served."""
    assert client.get('/').status_code == 404
