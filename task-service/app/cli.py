import argparse
import sys
from datetime import date, datetime, time, timezone
from typing import Optional, get_args

from app import config
from app.client import TaskClient, TaskServiceError
from app.filtering import filter_tasks
from app.logging_setup import setup_logging
from app.models import SortKey, TaskQuery, TaskResponse

SORT_KEYS = list(get_args(SortKey))
PRIORITY_NAMES = {1: "Low", 2: "Medium", 3: "High"}


def _parse_due(d: Optional[str]) -> Optional[datetime]:
    if not d:
        return None
    try:
        day = date.fromisoformat(d)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"Invalid date '{d}'. Use YYYY-MM-DD.") from e
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def _print_tasks(tasks: list[TaskResponse]) -> None:
    if not tasks:
        print("No tasks found.")
        return
    print(f"{'ID':>3}  {'ST':<4} {'PRI':<6}  {'DUE':<10}  TITLE")
    print("-" * 60)
    for t in tasks:
        due = t.dueDate.date().isoformat() if t.dueDate else ""
        st = "DONE" if t.isCompleted else "TODO"
        pri = PRIORITY_NAMES.get(t.priority, str(t.priority))
        print(f"{t.id:>3}  {st:<4} {pri:<6}  {due:<10}  {t.title}")


def _print_task(t: TaskResponse) -> None:
    print(f"#{t.id} {t.title}")
    print(f"  status:   {'done' if t.isCompleted else 'todo'}")
    print(f"  priority: {PRIORITY_NAMES.get(t.priority, t.priority)}")
    if t.dueDate:
        print(f"  due:      {t.dueDate.date().isoformat()}")
    if t.description:
        print(f"  {t.description}")
    print(f"  created:  {t.createdAt.isoformat()}")
    print(f"  updated:  {t.updatedAt.isoformat()}")


def cmd_list(client: TaskClient, ns: argparse.Namespace) -> int:
    is_completed = None
    if ns.completed:
        is_completed = True
    elif ns.pending:
        is_completed = False
    descending = None
    if ns.desc:
        descending = True
    elif ns.asc:
        descending = False
    query = TaskQuery(
        search=ns.search,
        isCompleted=is_completed,
        priority=ns.priority,
        sortBy=ns.sort,
        sortDescending=descending,
    )
    _print_tasks(filter_tasks(client.list_tasks(), query))
    return 0


def cmd_show(client: TaskClient, ns: argparse.Namespace) -> int:
    _print_task(client.get_task(ns.task_id))
    return 0


def cmd_add(client: TaskClient, ns: argparse.Namespace) -> int:
    task = client.create_task(
        ns.title,
        description=ns.description,
        dueDate=ns.due,
        priority=ns.priority,
    )
    print(f"Added task #{task.id}: {task.title}")
    return 0


def cmd_edit(client: TaskClient, ns: argparse.Namespace) -> int:
    changes = {
        "title": ns.title,
        "description": ns.description,
        "dueDate": ns.due,
        "priority": ns.priority,
    }
    changes = {k: v for k, v in changes.items() if v is not None}
    if not changes:
        print("Nothing to change.", file=sys.stderr)
        return 1
    task = client.update_task(ns.task_id, **changes)
    print(f"Updated task #{task.id}: {task.title}")
    return 0


def cmd_toggle(client: TaskClient, ns: argparse.Namespace) -> int:
    task = client.toggle_complete(client.get_task(ns.task_id))
    state = "done" if task.isCompleted else "todo"
    print(f"Marked task #{task.id} as {state}.")
    return 0


def cmd_delete(client: TaskClient, ns: argparse.Namespace) -> int:
    client.delete_task(ns.task_id)
    print(f"Deleted task #{ns.task_id}.")
    return 0


def cmd_stats(client: TaskClient, ns: argparse.Namespace) -> int:
    s = client.stats()
    print(f"Total:     {s.total}")
    print(f"Completed: {s.completed}")
    print(f"Pending:   {s.pending}")
    print(f"Overdue:   {s.overdue}")
    print(f"Done:      {s.completionRate:.1f}%")
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="todo", description="Todo: track tasks through the task service.")
    p.add_argument("--api", help=f"Task service URL (default: {config.TODO_API_URL} or TODO_API_URL env var)")
    p.add_argument("-v", "--verbose", action="store_true", help="Log client activity to stderr.")
    sub = p.add_subparsers(dest="cmd", required=True)

    s = sub.add_parser("list", help="List tasks.")
    s.add_argument("-s", "--search", help="Case-insensitive text in title or description.")
    g = s.add_mutually_exclusive_group()
    g.add_argument("--completed", action="store_true", help="Only completed tasks.")
    g.add_argument("--pending", action="store_true", help="Only pending tasks.")
    s.add_argument("-p", "--priority", type=int, choices=(1, 2, 3), help="Only this priority.")
    s.add_argument("--sort", choices=SORT_KEYS, help="Sort key (default: newest first).")
    g = s.add_mutually_exclusive_group()
    g.add_argument("--asc", action="store_true", help="Ascending order.")
    g.add_argument("--desc", action="store_true", help="Descending order.")
    s.set_defaults(func=cmd_list)

    s = sub.add_parser("show", help="Show one task.")
    s.add_argument("task_id", type=int, help="Task ID.")
    s.set_defaults(func=cmd_show)

    s = sub.add_parser("add", help="Add a new task.")
    s.add_argument("title", help="Short task title.")
    s.add_argument("-d", "--description", help="Longer description.")
    s.add_argument("-p", "--priority", type=int, choices=(1, 2, 3), help="1 = Low, 2 = Medium, 3 = High.")
    s.add_argument("--due", type=_parse_due, help="Due date in YYYY-MM-DD.")
    s.set_defaults(func=cmd_add)

    s = sub.add_parser("edit", help="Change fields of a task.")
    s.add_argument("task_id", type=int, help="Task ID.")
    s.add_argument("--title", help="New title.")
    s.add_argument("-d", "--description", help="New description.")
    s.add_argument("-p", "--priority", type=int, choices=(1, 2, 3), help="New priority.")
    s.add_argument("--due", type=_parse_due, help="New due date in YYYY-MM-DD.")
    s.set_defaults(func=cmd_edit)

    s = sub.add_parser("toggle", help="Flip a task between todo and done.")
    s.add_argument("task_id", type=int, help="Task ID.")
    s.set_defaults(func=cmd_toggle)

    s = sub.add_parser("delete", help="Delete a task.")
    s.add_argument("task_id", type=int, help="Task ID.")
    s.set_defaults(func=cmd_delete)

    s = sub.add_parser("stats", help="Show task counts.")
    s.set_defaults(func=cmd_stats)

    return p


def main(argv: Optional[list[str]] = None, client: Optional[TaskClient] = None) -> int:
    parser = build_parser()
    ns = parser.parse_args(argv)
    if ns.verbose:
        setup_logging("DEBUG")
    if client is None:
        with TaskClient(base_url=ns.api) as owned:
            return _run(owned, ns)
    return _run(client, ns)


def _run(client: TaskClient, ns: argparse.Namespace) -> int:
    try:
        return int(ns.func(client, ns))
    except TaskServiceError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
