import pytest
from fastapi.testclient import TestClient

from gigboard.core.config import default_freelancers
from gigboard.db.snapshot_ops import MemorySnapshotStorage
from gigboard.main import create_app
from gigboard.store import ProjectStore

CLIENT_ID = "client-1"
FREELANCER_ID = "current-freelancer-id"

@pytest.fixture
def storage():
    return MemorySnapshotStorage()

@pytest.fixture
def store(storage):
    return ProjectStore(storage, key="project-store", initial_freelancers=default_freelancers())

@pytest.fixture
def app(store):
    app = create_app(store)
    yield app
    app.dependency_overrides.clear()

@pytest.fixture
def client(app):
    return TestClient(app)

@pytest.fixture
def client_headers():
    return {"X-Actor-Id": CLIENT_ID}

@pytest.fixture
def freelancer_headers():
    return {"X-Actor-Id": FREELANCER_ID}
