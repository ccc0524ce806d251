import argparse

import pytest

from app import cli
from app.cache import MemoryCache
from app.client import TaskClient

from .fakes import DownCache


@pytest.fixture()
def client(api):
    return TaskClient(http=api, cache=MemoryCache())


def run(client, *argv):
    return cli.main(list(argv), client=client)


def test_add_and_list(client, capsys):
    assert run(client, "add", "Walk the dog", "-p", "3", "--due", "2024-01-01") == 0
    assert run(client, "add", "Buy groceries", "-d", "milk") == 0
    capsys.readouterr()

    assert run(client, "list", "--sort", "title") == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[2].endswith("Buy groceries")
    assert "High" in lines[3] and "2024-01-01" in lines[3]
    assert lines[3].endswith("Walk the dog")


def test_list_filters(client, capsys):
    run(client, "add", "Buy groceries", "-d", "milk and eggs")
    run(client, "add", "Call mom")
    capsys.readouterr()

    run(client, "list", "--search", "EGGS")
    out = capsys.readouterr().out
    assert "Buy groceries" in out
    assert "Call mom" not in out

    run(client, "list", "--completed")
    assert "No tasks found." in capsys.readouterr().out


def test_toggle_edit_show(client, capsys):
    run(client, "add", "Call mom")
    task_id = client.list_tasks()[0].id
    assert run(client, "toggle", str(task_id)) == 0
    assert f"Marked task #{task_id} as done." in capsys.readouterr().out

    assert run(client, "edit", str(task_id), "--title", "Call dad", "-p", "2") == 0
    assert run(client, "show", str(task_id)) == 0
    out = capsys.readouterr().out
    assert f"#{task_id} Call dad" in out
    assert "status:   done" in out
    assert "priority: Medium" in out


def test_edit_without_changes(client, capsys):
    run(client, "add", "Call mom")
    task_id = client.list_tasks()[0].id
    assert run(client, "edit", str(task_id)) == 1
    assert "Nothing to change." in capsys.readouterr().err


def test_delete_missing_task(client, capsys):
    assert run(client, "delete", "404") == 1
    assert "Task with ID 404 not found" in capsys.readouterr().err


def test_stats_command(client, capsys):
    run(client, "add", "A")
    capsys.readouterr()
    assert run(client, "stats") == 0
    out = capsys.readouterr().out
    assert "Total:     1" in out
    assert "Done:      0.0%" in out


def test_bad_due_date():
    with pytest.raises(argparse.ArgumentTypeError):
        cli._parse_due("01/02/2024")


def test_unknown_sort_key_is_rejected(client):
    with pytest.raises(SystemExit) as exc:
        run(client, "list", "--sort", "color")
    assert exc.value.code == 2


def test_list_with_unreachable_cache(api, capsys):
    client = TaskClient(http=api, cache=DownCache())
    assert run(client, "add", "Walk the dog") == 0
    assert run(client, "list") == 0
    assert "Walk the dog" in capsys.readouterr().out


class RecordingClient:
    instances = []

    def __init__(self, base_url=None):
        self.base_url = base_url
        self.closed = False
        RecordingClient.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.closed = True

    def list_tasks(self):
        return []


def test_main_closes_the_client_it_creates(monkeypatch, capsys):
    RecordingClient.instances = []
    monkeypatch.setattr(cli, "TaskClient", RecordingClient)
    assert cli.main(["--api", "http://tasks.example", "list"]) == 0
    [created] = RecordingClient.instances
    assert created.base_url == "http://tasks.example"
    assert created.closed is True
    assert "No tasks found." in capsys.readouterr().out
