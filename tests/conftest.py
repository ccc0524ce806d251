# tests/conftest.py
import pytest
from fastapi.testclient import TestClient

from app.db import init_db, make_engine, make_session_factory
from app.main import app, get_store
from app.models import TaskResponse
from app.store import TaskStore


@pytest.fixture()
def store():
    engine = make_engine("sqlite://")
    init_db(engine)
    yield TaskStore(make_session_factory(engine))
    engine.dispose()


@pytest.fixture()
def api(store):
    app.dependency_overrides[get_store] = lambda: store
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def sample_tasks():
    """Four tasks: two pending, two done; one without a due date."""
    return [
        TaskResponse(
            id=1,
            title="Buy groceries",
            description="Get milk, bread, and eggs",
            isCompleted=False,
            createdAt="2024-01-01T10:00:00Z",
            updatedAt="2024-01-01T10:00:00Z",
            dueDate="2024-01-02T00:00:00Z",
            priority=2,
        ),
        TaskResponse(
            id=2,
            title="Walk the dog",
            description="Take Fido for a walk in the park",
            isCompleted=True,
            createdAt="2024-01-01T09:00:00Z",
            updatedAt="2024-01-01T11:00:00Z",
            dueDate="2024-01-01T18:00:00Z",
            priority=1,
        ),
        TaskResponse(
            id=3,
            title="Finish report",
            description="Complete the quarterly report for work",
            isCompleted=False,
            createdAt="2024-01-01T08:00:00Z",
            updatedAt="2024-01-01T12:00:00Z",
            priority=3,
        ),
        TaskResponse(
            id=4,
            title="Call mom",
            isCompleted=True,
            createdAt="2024-01-01T07:00:00Z",
            updatedAt="2024-01-01T07:00:00Z",
            dueDate="2024-01-01T20:00:00Z",
            priority=1,
        ),
    ]
