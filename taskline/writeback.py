"""Write task edits back into the lines of their files."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable
from datetime import date

from .attributes import RE_WIKI_LINK, AttributeParser
from .config import Settings
from .convert import AttributeConverter, detect_eol
from .files import FileAdapter, read_content, write_content
from .line import line_to_string, parse_line
from .models import AttributeValue, LineStructure, Task, TaskStatus
from .status import encode

logger = logging.getLogger(__name__)

LineUpdater = Callable[[LineStructure, Task], None]


def group_tasks_by_file(
    tasks: Iterable[Task],
) -> list[tuple[FileAdapter, list[Task]]]:
    """Group tasks by the path of their file, keeping first-seen order."""
    groups: dict[str, tuple[FileAdapter, list[Task]]] = {}
    for task in tasks:
        if task.file is None:
            logger.debug("[WRITEBACK] '%s' has no file; skipping", task.text)
            continue
        groups.setdefault(task.file.path, (task.file, []))[1].append(task)
    return list(groups.values())


class FileOperations:
    """Applies attribute, tag and status edits to task lines.

    Every public method reads each affected file once and writes it once.
    Only the lines named by the tasks' line numbers are rewritten; the
    rest of the content, including its line endings, is left alone.
    """

    def __init__(self, settings: Settings | None = None, today: date | None = None) -> None:
        self.settings = settings
        self.today = today
        self.parser = AttributeParser(settings, today=today)

    @property
    def completed_date_attribute(self) -> str:
        return self.settings.completed_date_attribute if self.settings else "completed"

    # ------------------------------------------------------------------
    # Core read-modify-write
    # ------------------------------------------------------------------

    def apply(self, task: Task, update_line: LineUpdater) -> bool:
        """Rewrite the task's line with ``update_line``.

        Returns:
            True if the line changed. A task without a line number is a no-op.
        """
        if task.line is None:
            logger.debug("[WRITEBACK] '%s' has no line number; skipping", task.text)
            return False
        if task.file is None:
            logger.debug("[WRITEBACK] '%s' has no file; skipping", task.text)
            return False
        return self._update_file(task.file, [task], update_line, {"line_number": task.line}) > 0

    def apply_batch(self, tasks: Iterable[Task], update_line: LineUpdater) -> int:
        """Rewrite many task lines, one read and one write per file.

        Returns:
            The number of lines that changed.
        """
        changed = 0
        for file, file_tasks in group_tasks_by_file(tasks):
            changed += self._update_file(
                file, file_tasks, update_line, {"task_count": len(file_tasks)}
            )
        return changed

    def _update_file(
        self,
        file: FileAdapter,
        tasks: list[Task],
        update_line: LineUpdater,
        context: dict[str, object],
    ) -> int:
        content = read_content(file, **context)

        eol = detect_eol(content)
        lines = content.split(eol)
        changed = 0

        for task in tasks:
            number = task.line
            if number is None:
                logger.debug("[WRITEBACK] '%s' has no line number; skipping", task.text)
                continue
            if not 0 <= number < len(lines):
                logger.warning(
                    "[WRITEBACK] %s has no line %d (%d lines); skipping '%s'",
                    file.path, number, len(lines), task.text,
                )
                continue
            original = lines[number]
            parsed = parse_line(original)
            before = LineStructure(**vars(parsed))
            update_line(parsed, task)
            if parsed == before:
                continue
            lines[number] = line_to_string(parsed)
            if lines[number] != original:
                changed += 1
                logger.debug(
                    "[WRITEBACK] %s:%d %r -> %r", file.path, number, original, lines[number]
                )

        write_content(file, eol.join(lines), **context)
        return changed

    # ------------------------------------------------------------------
    # Line updaters
    # ------------------------------------------------------------------

    def _set_attribute(self, name: str, value: AttributeValue | None) -> LineUpdater:
        def update(line: LineStructure, task: Task) -> None:
            parsed = self.parser.parse_attributes(line.remainder)
            if value is None or value is False:
                if name not in parsed.attributes:
                    return
                del parsed.attributes[name]
            else:
                if parsed.attributes.get(name) == value:
                    return
                parsed.attributes[name] = value
            line.remainder = self.parser.attributes_to_string(parsed)

        return update

    def _append_tag(self, tag: str) -> LineUpdater:
        def update(line: LineStructure, task: Task) -> None:
            parsed = self.parser.parse_attributes(line.remainder)
            parsed.text = f"{parsed.text} #{tag}"
            line.remainder = self.parser.attributes_to_string(parsed)

        return update

    def _remove_tag(self, tag: str) -> LineUpdater:
        # Wiki links are matched only so they can be put back untouched.
        pattern = re.compile(
            rf"({RE_WIKI_LINK.pattern})|\s*#{re.escape(tag)}(?![A-Za-z0-9_-])"
        )

        def update(line: LineStructure, task: Task) -> None:
            parsed = self.parser.parse_attributes(line.remainder)
            parsed.text = pattern.sub(lambda m: m.group(1) or "", parsed.text).strip()
            line.remainder = self.parser.attributes_to_string(parsed)

        return update

    def _update_status(self, line: LineStructure, task: Task) -> None:
        line.checkbox = encode(task.status)
        parsed = self.parser.parse_attributes(line.remainder)
        attribute = self.completed_date_attribute
        if isinstance(task.status, TaskStatus) and task.status.is_done:
            parsed.attributes[attribute] = (self.today or date.today()).isoformat()
        elif attribute in parsed.attributes:
            del parsed.attributes[attribute]
        else:
            return
        line.remainder = self.parser.attributes_to_string(parsed)

    # ------------------------------------------------------------------
    # Single-task operations
    # ------------------------------------------------------------------

    def update_attribute(self, task: Task, name: str, value: AttributeValue | None) -> bool:
        """Set ``name`` on the task's line; None or False removes it."""
        return self.apply(task, self._set_attribute(name, value))

    def remove_attribute(self, task: Task, name: str) -> bool:
        return self.apply(task, self._set_attribute(name, None))

    def append_tag(self, task: Task, tag: str) -> bool:
        if tag in task.tags:
            return False
        return self.apply(task, self._append_tag(tag))

    def remove_tag(self, task: Task, tag: str) -> bool:
        if tag not in task.tags:
            return False
        return self.apply(task, self._remove_tag(tag))

    def update_status(self, task: Task) -> bool:
        """Write ``task.status`` into the checkbox.

        Completing or canceling stamps the completed-date attribute with
        today's date; any other status removes it.
        """
        return self.apply(task, self._update_status)

    # ------------------------------------------------------------------
    # Batch operations
    # ------------------------------------------------------------------

    def batch_update_attribute(
        self, tasks: list[Task], name: str, value: AttributeValue | None
    ) -> int:
        if not tasks:
            return 0
        return self.apply_batch(tasks, self._set_attribute(name, value))

    def batch_remove_attribute(self, tasks: list[Task], name: str) -> int:
        if not tasks:
            return 0
        return self.apply_batch(tasks, self._set_attribute(name, None))

    def batch_append_tag(self, tasks: list[Task], tag: str) -> int:
        needing = [t for t in tasks if tag not in t.tags]
        if not needing:
            return 0
        return self.apply_batch(needing, self._append_tag(tag))

    def batch_remove_tag(self, tasks: list[Task], tag: str) -> int:
        having = [t for t in tasks if tag in t.tags]
        if not having:
            return 0
        return self.apply_batch(having, self._remove_tag(tag))

    def batch_update_status(self, tasks: list[Task]) -> int:
        if not tasks:
            return 0
        return self.apply_batch(tasks, self._update_status)

    # ------------------------------------------------------------------
    # Whole-file conversion
    # ------------------------------------------------------------------

    def convert_file(
        self, file: FileAdapter, converter: AttributeConverter | None = None
    ) -> list[int]:
        """Convert shortcut attributes on every task line of a file.

        Writes only when something changed.

        Returns:
            The 0-based numbers of the converted lines.
        """
        converter = converter or AttributeConverter(self.settings, today=self.today)
        content = read_content(file)

        new_content, changed = converter.convert_content(content)
        if not changed:
            return []

        write_content(file, new_content, line_count=len(changed))
        logger.info("[WRITEBACK] converted %d line(s) in %s", len(changed), file.path)
        return changed
