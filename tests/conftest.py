import os
import sys

# Ensure project root is on sys.path so tests can import `hostwatch`
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)


import pytest
from hostwatch import create_app
from hostwatch.snapshot_store import SnapshotStore


@pytest.fixture
def store():
    return SnapshotStore(max_snapshots=5)


@pytest.fixture
def app(store):
    return create_app({"TESTING": True}, store=store)


@pytest.fixture
def client(app):
    with app.test_client() as client:
        yield client
