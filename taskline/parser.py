"""Parser for checkbox tasks in markdown files."""

from __future__ import annotations

import re
from collections.abc import Iterator

from .attributes import AttributeParser
from .config import Settings
from .convert import detect_eol
from .files import FileAdapter, read_content
from .line import parse_line
from .models import Task
from .status import decode_checkbox

RE_CODE_FENCE = re.compile(r"^\s*```")
RE_BLANK = re.compile(r"^\s*$")


def indent_level(indentation: str) -> int:
    """Spaces count as one column, tabs as four."""
    return indentation.count(" ") + indentation.count("\t") * 4


def parse_task_line(
    line: str,
    line_number: int | None = None,
    parser: AttributeParser | None = None,
) -> Task | None:
    """Parse one line into a Task, or None when it has no checkbox."""
    parsed = parse_line(line)
    if not parsed.checkbox:
        return None
    attributes = (parser or AttributeParser()).parse_attributes(parsed.remainder)
    return Task(
        status=decode_checkbox(parsed.checkbox),
        text=attributes.text,
        attributes=attributes.attributes,
        tags=attributes.tags,
        line=line_number,
        indent_level=indent_level(parsed.indentation),
    )


def parse_tasks_md(
    content: str,
    file: FileAdapter | None = None,
    settings: Settings | None = None,
) -> list[Task]:
    """Parse markdown content into top-level tasks with nested subtasks.

    Tasks inside fenced code blocks are ignored. A task indented deeper than
    the task above it becomes that task's subtask.
    """
    parser = AttributeParser(settings)
    lines = content.split(detect_eol(content))
    in_code_block = False
    found: list[Task] = []

    for number, line in enumerate(lines):
        if RE_CODE_FENCE.match(line):
            in_code_block = not in_code_block
            continue
        if in_code_block or RE_BLANK.match(line):
            continue
        task = parse_task_line(line, number, parser)
        if task is not None:
            found.append(task)

    # Nest by indentation
    roots: list[Task] = []
    stack: list[Task] = []
    for task in found:
        while stack and task.indent_level <= stack[-1].indent_level:
            stack.pop()
        if stack:
            stack[-1].subtasks.append(task)
        else:
            roots.append(task)
        stack.append(task)

    for task in iter_tasks(roots):
        task.file = file
    return roots


def parse_tasks_file(file: FileAdapter, settings: Settings | None = None) -> list[Task]:
    """Read a file through its adapter and parse its tasks."""
    return parse_tasks_md(read_content(file), file=file, settings=settings)


def iter_tasks(tasks: list[Task]) -> Iterator[Task]:
    """Yield tasks depth-first, parents before their subtasks."""
    for task in tasks:
        yield task
        yield from iter_tasks(task.subtasks)
