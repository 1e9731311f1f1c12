"""CLI entry point for taskline."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys

from .config import Settings, load_settings
from .convert import AttributeConverter
from .dates import resolve_date
from .errors import TaskPlannerError
from .files import FileAdapter, HttpFile, open_file, read_content
from .models import Task, TaskStatus
from .parser import iter_tasks, parse_tasks_file
from .writeback import FileOperations

TOKEN_ENV_VAR = "TASKLINE_TOKEN"

STATUS_NAMES = {
    "todo": TaskStatus.TODO,
    "in-progress": TaskStatus.IN_PROGRESS,
    "done": TaskStatus.COMPLETE,
    "complete": TaskStatus.COMPLETE,
    "canceled": TaskStatus.CANCELED,
    "cancelled": TaskStatus.CANCELED,
    "delegated": TaskStatus.DELEGATED,
    "attention": TaskStatus.ATTENTION_REQUIRED,
}


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="taskline",
        description="Read and edit task metadata stored in markdown checkbox lines.",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to a JSON settings file (or set TASKLINE_CONFIG env var)",
    )
    parser.add_argument(
        "--token",
        type=str,
        default=None,
        help="Bearer token for http(s) files (or set TASKLINE_TOKEN env var)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("list", help="List the tasks in a file")
    p.add_argument("file", help="Path or URL of a markdown file")
    p.add_argument("--json", action="store_true", help="Print tasks as JSON")

    p = sub.add_parser("convert", help="Convert @shortcuts into [key:: value] fields")
    p.add_argument("file", help="Path or URL of a markdown file")
    p.add_argument(
        "--dry-run",
        action="store_true",
        help="Log what would change without writing the file",
    )

    p = sub.add_parser("set", help="Set an attribute on a task line")
    p.add_argument("file")
    p.add_argument("line", type=int, help="1-based line number")
    p.add_argument("key")
    p.add_argument("value")

    p = sub.add_parser("unset", help="Remove an attribute from a task line")
    p.add_argument("file")
    p.add_argument("line", type=int, help="1-based line number")
    p.add_argument("key")

    for name, help_text in (("tag", "Add a #tag"), ("untag", "Remove a #tag")):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("file")
        p.add_argument("line", type=int, help="1-based line number")
        p.add_argument("tag")

    p = sub.add_parser("status", help="Change the status of a task line")
    p.add_argument("file")
    p.add_argument("line", type=int, help="1-based line number")
    p.add_argument("status", choices=sorted(STATUS_NAMES))

    p = sub.add_parser("resolve", help="Resolve a date phrase to YYYY-MM-DD")
    p.add_argument("phrase", nargs="+")

    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    # Configure logging
    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(message)s",
    )

    try:
        settings = load_settings(args.config)
    except TaskPlannerError as exc:
        logging.error("%s", exc)
        return 1

    if args.command == "resolve":
        phrase = " ".join(args.phrase)
        resolved = resolve_date(phrase, week_start=settings.first_weekday)
        if resolved is None:
            logging.error("Not a date: %r", phrase)
            return 1
        print(resolved)
        return 0

    token = args.token or os.environ.get(TOKEN_ENV_VAR)
    file = open_file(args.file, token=token)
    try:
        return _run(args, file, settings)
    except TaskPlannerError as exc:
        logging.error("%s", exc)
        return 1
    finally:
        if isinstance(file, HttpFile):
            file.close()


def _run(args: argparse.Namespace, file: FileAdapter, settings: Settings) -> int:
    ops = FileOperations(settings)

    if args.command == "list":
        tasks = list(iter_tasks(parse_tasks_file(file, settings)))
        logging.info("Found %d tasks in %s", len(tasks), file.path)
        if args.json:
            print(json.dumps([_task_to_dict(t) for t in tasks], indent=2))
        else:
            for task in tasks:
                print(_format_task(task))
        return 0

    if args.command == "convert":
        converter = AttributeConverter(settings)
        if args.dry_run:
            _, changed = converter.convert_content(read_content(file))
            logging.info(
                "[DRY RUN] Would convert %d line(s) in %s", len(changed), file.path
            )
            return 0
        changed = ops.convert_file(file, converter)
        if not changed:
            logging.info("Nothing to convert in %s", file.path)
        return 0

    task = _load_task(file, args.line, settings)
    if task is None:
        logging.error("Line %d of %s is not a task", args.line, file.path)
        return 1

    if args.command == "set":
        modified = ops.update_attribute(task, args.key, args.value)
    elif args.command == "unset":
        modified = ops.remove_attribute(task, args.key)
    elif args.command == "tag":
        modified = ops.append_tag(task, args.tag.lstrip("#"))
    elif args.command == "untag":
        modified = ops.remove_tag(task, args.tag.lstrip("#"))
    else:
        task.status = STATUS_NAMES[args.status]
        modified = ops.update_status(task)

    if modified:
        logging.info("Updated line %d of %s", args.line, file.path)
    else:
        logging.info("Line %d of %s already up to date", args.line, file.path)
    return 0


def _load_task(file: FileAdapter, line: int, settings: Settings) -> Task | None:
    """Find the task on a 1-based line number of ``file``."""
    for task in iter_tasks(parse_tasks_file(file, settings)):
        if task.line == line - 1:
            return task
    return None


def _format_task(task: Task) -> str:
    number = task.line + 1 if task.line is not None else "?"
    line = f"{number:>4} {'  ' * (task.indent_level // 2)}[{task.status.value}] {task.text}"
    if task.attributes:
        attrs = ", ".join(f"{k}={v}" for k, v in task.attributes.items())
        line += f"  ({attrs})"
    return line


def _task_to_dict(task: Task) -> dict:
    return {
        "line": task.line + 1 if task.line is not None else None,
        "status": task.status.value,
        "text": task.text,
        "attributes": task.attributes,
        "tags": task.tags,
        "subtasks": len(task.subtasks),
    }


if __name__ == "__main__":
    sys.exit(main())
