import httpx
import pytest

from app.cache import MemoryCache
from app.client import TaskClient, TaskNotFoundError, TaskServiceError, TaskValidationError
from app.models import TaskCreate

from .fakes import DownCache


@pytest.fixture()
def client(api):
    return TaskClient(http=api, cache=MemoryCache(ttl=60))


def test_create_and_read(client):
    task = client.create_task("Buy groceries", description="milk", priority=2)
    assert task.priority == 2
    assert client.get_task(task.id) == task
    assert [t.id for t in client.list_tasks()] == [task.id]


def test_create_defaults_priority(client):
    assert client.create_task("Call mom").priority == 1


def test_reads_are_cached(client, store):
    client.create_task("First")
    assert len(client.list_tasks()) == 1
    # written behind the client's back: the cached list is still served
    store.insert(TaskCreate(title="Sneaky"))
    assert len(client.list_tasks()) == 1


def test_mutations_invalidate_cache(client, store):
    task = client.create_task("First")
    client.list_tasks()
    client.get_task(task.id)
    store.insert(TaskCreate(title="Sneaky"))

    updated = client.update_task(task.id, title="Renamed")
    assert updated.title == "Renamed"
    assert sorted(t.title for t in client.list_tasks()) == ["Renamed", "Sneaky"]
    assert client.get_task(task.id).title == "Renamed"


def test_failed_mutation_still_invalidates(client, store):
    client.create_task("First")
    client.list_tasks()
    store.insert(TaskCreate(title="Sneaky"))
    with pytest.raises(TaskNotFoundError):
        client.delete_task(999)
    assert len(client.list_tasks()) == 2


def test_toggle_complete(client):
    task = client.create_task("Walk the dog")
    done = client.toggle_complete(task)
    assert done.isCompleted is True
    assert client.toggle_complete(done).isCompleted is False


def test_update_can_clear_description(client):
    task = client.create_task("Walk the dog", description="park")
    assert client.update_task(task.id, description=None).description is None


def test_delete(client):
    task = client.create_task("Walk the dog")
    client.delete_task(task.id)
    with pytest.raises(TaskNotFoundError) as exc:
        client.get_task(task.id)
    assert exc.value.status_code == 404
    assert client.list_tasks() == []


def test_validation_error(client):
    with pytest.raises(TaskValidationError) as exc:
        client.create_task("x" * 201)
    assert exc.value.status_code == 422
    assert exc.value.errors


def test_stats(client):
    task = client.create_task("A")
    client.create_task("B")
    client.toggle_complete(task)
    stats = client.stats()
    assert (stats.total, stats.completed, stats.pending) == (2, 1, 1)


def test_server_error():
    def handler(request):
        return httpx.Response(500, json={"detail": "An error occurred while processing the request"})

    http = httpx.Client(transport=httpx.MockTransport(handler), base_url="http://tasks")
    client = TaskClient(http=http, cache=MemoryCache())
    with pytest.raises(TaskServiceError) as exc:
        client.list_tasks()
    assert exc.value.status_code == 500
    assert not isinstance(exc.value, TaskNotFoundError)


def test_transport_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    http = httpx.Client(transport=httpx.MockTransport(handler), base_url="http://tasks")
    with pytest.raises(TaskServiceError):
        TaskClient(http=http, cache=MemoryCache()).list_tasks()


def test_unreachable_cache_falls_back_to_service(api):
    cache = DownCache()
    client = TaskClient(http=api, cache=cache)
    task = client.create_task("Walk the dog")
    assert [t.id for t in client.list_tasks()] == [task.id]
    assert client.get_task(task.id) == task
    client.delete_task(task.id)
    assert client.list_tasks() == []
    assert cache.calls > 0
