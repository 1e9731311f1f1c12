"""Map task statuses to checkbox markers and back."""

from __future__ import annotations

from .line import line_to_string, parse_line
from .models import TaskStatus

# Markers are matched case-insensitively; canceled has several aliases.
_MARK_TO_STATUS: dict[str, TaskStatus] = {
    " ": TaskStatus.TODO,
    "x": TaskStatus.COMPLETE,
    ">": TaskStatus.IN_PROGRESS,
    "-": TaskStatus.CANCELED,
    "]": TaskStatus.CANCELED,
    "c": TaskStatus.CANCELED,
    "!": TaskStatus.ATTENTION_REQUIRED,
    "d": TaskStatus.DELEGATED,
}

_STATUS_TO_MARK: dict[TaskStatus, str] = {
    TaskStatus.TODO: " ",
    TaskStatus.COMPLETE: "x",
    TaskStatus.IN_PROGRESS: ">",
    TaskStatus.CANCELED: "-",
    TaskStatus.ATTENTION_REQUIRED: "!",
    TaskStatus.DELEGATED: "d",
}


def decode(mark: str) -> TaskStatus:
    """Status for a single marker character; unknown markers mean TODO."""
    return _MARK_TO_STATUS.get(mark.lower(), TaskStatus.TODO)


def decode_checkbox(checkbox: str) -> TaskStatus:
    """Status for a whole checkbox token such as ``[x]`` (``[]`` is TODO)."""
    return decode(checkbox[1:-1]) if len(checkbox) == 3 else TaskStatus.TODO


def encode(status: object) -> str:
    """Checkbox token for ``status``; empty string when it is not a known status."""
    try:
        mark = _STATUS_TO_MARK.get(status)  # type: ignore[call-overload]
    except TypeError:
        return ""
    return f"[{mark}]" if mark is not None else ""


def toggle_checkbox(line: str) -> str:
    """Turn a list item into a todo, or a todo back into a plain list item."""
    parsed = parse_line(line)
    parsed.checkbox = "" if parsed.checkbox else "[ ]"
    return line_to_string(parsed)


def set_checkmark(line: str, mark: str) -> str:
    parsed = parse_line(line)
    parsed.checkbox = f"[{mark}]"
    return line_to_string(parsed)
