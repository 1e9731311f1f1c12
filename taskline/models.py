"""Data models for task lines parsed from markdown files."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .files import FileAdapter

AttributeValue = str | bool


class TaskStatus(str, Enum):
    """Task lifecycle status, as encoded by the checkbox marker."""

    ATTENTION_REQUIRED = "attention_required"
    TODO = "todo"
    IN_PROGRESS = "in_progress"
    DELEGATED = "delegated"
    COMPLETE = "complete"
    CANCELED = "canceled"

    @property
    def is_done(self) -> bool:
        return self in (TaskStatus.COMPLETE, TaskStatus.CANCELED)


@dataclass
class LineStructure:
    """The structural fields of one list line."""

    indentation: str = ""
    list_marker: str = ""
    checkbox: str = ""
    date_prefix: str = ""
    remainder: str = ""


@dataclass
class ParsedAttributes:
    """Plain text of a line with its attributes and tags pulled out."""

    text: str
    attributes: dict[str, AttributeValue] = field(default_factory=dict)
    tags: list[str] = field(default_factory=list)


@dataclass
class Task:
    """A single task parsed from a checkbox line."""

    status: TaskStatus
    text: str
    attributes: dict[str, AttributeValue] = field(default_factory=dict)
    tags: list[str] = field(default_factory=list)
    file: FileAdapter | None = None
    line: int | None = None
    subtasks: list[Task] = field(default_factory=list)
    indent_level: int = 0

    @property
    def id(self) -> str:
        path = self.file.path if self.file is not None else ""
        return f"{path}-{self.line or 0}-{self.text}"

    @property
    def priority(self) -> str | None:
        value = self.attributes.get("priority")
        return value if isinstance(value, str) else None

    def find_date(self, attribute: str) -> date | None:
        """Return the attribute as a date, or None when absent or not ISO."""
        value = self.attributes.get(attribute)
        if not isinstance(value, str):
            return None
        try:
            return date.fromisoformat(value.strip())
        except ValueError:
            return None
