import os
import tempfile

import pytest

from app import create_app


@pytest.fixture
def app():
    """App with an isolated temporary database."""
    db_fd, db_path = tempfile.mkstemp(suffix='.db')

    app = create_app({
        'TESTING': True,
        'DATABASE': db_path,
        'SECRET_KEY': 'dev-key-for-testing',
        'SEED_CATALOG': False,
    })

    yield app

    os.close(db_fd)
    for path in (db_path, db_path + '-wal', db_path + '-shm'):
        try:
            os.unlink(path)
        except FileNotFoundError:
            pass
        except PermissionError:
            pass  # Windows may hold the file


@pytest.fixture
def client(app):
    with app.test_client() as client:
        yield client


@pytest.fixture
def make_plant(client):
    """Create a plant through the API and return its JSON."""
    def _make_plant(name, **fields):
        rv = client.post('/api/plants/', json={'name': name, **fields})
        assert rv.status_code == 201, rv.get_json()
        return rv.get_json()['plant']
    return _make_plant


@pytest.fixture
def make_bed(client):
    def _make_bed(name='Bed A', rows=4, cols=4, **fields):
        rv = client.post('/api/beds/', json={'name': name, 'rows': rows, 'cols': cols, **fields})
        assert rv.status_code == 201, rv.get_json()
        return rv.get_json()['bed']
    return _make_bed
