"""Normalize shortcut attributes into canonical date and priority fields.

``- [ ] Call Bob @tomorrow @high`` becomes
``- [ ] Call Bob [due:: 2025-01-16] [priority:: high]``.
"""

from __future__ import annotations

import logging
import re
from datetime import date

from .attributes import PRIORITY_SHORTCUTS, AttributeParser
from .config import Settings
from .dates import resolve_date
from .line import line_to_string, parse_line
from .models import ParsedAttributes

logger = logging.getLogger(__name__)

RE_CHECKBOX_ITEM = re.compile(r"^(\s*)?[-*]\s*\[.\]")


def detect_eol(content: str) -> str:
    return "\r\n" if "\r\n" in content else "\n"


def should_convert(line: str) -> bool:
    """Only checkbox list items that contain an ``@`` are worth converting."""
    return "@" in line and RE_CHECKBOX_ITEM.match(line) is not None


class AttributeConverter:
    """Rewrites a line so its attributes use canonical names and ISO dates."""

    def __init__(self, settings: Settings | None = None, today: date | None = None) -> None:
        self.settings = settings
        self.today = today
        self.parser = AttributeParser(settings, today=today)

    @property
    def due_date_attribute(self) -> str:
        return self.settings.due_date_attribute if self.settings else "due"

    def convert(self, line: str) -> str:
        parsed_line = parse_line(line)
        attributes = self.parser.parse_attributes(parsed_line.remainder)
        self._convert_dates(attributes)
        self._convert_priorities(attributes)
        parsed_line.remainder = self.parser.attributes_to_string(attributes)
        return line_to_string(parsed_line)

    def convert_content(self, content: str) -> tuple[str, list[int]]:
        """Convert every eligible line of a document.

        Returns:
            The new content (same line ending) and the 0-based numbers of the
            lines that changed.
        """
        eol = detect_eol(content)
        lines = content.split(eol)
        changed: list[int] = []
        for number, line in enumerate(lines):
            if not should_convert(line):
                continue
            converted = self.convert(line)
            if converted != line:
                lines[number] = converted
                changed.append(number)
                logger.debug("[CONVERT] line %d: %r -> %r", number, line, converted)
        return eol.join(lines), changed

    def _resolve(self, phrase: str) -> str | None:
        week_start = self.settings.first_weekday if self.settings else 0
        return resolve_date(phrase, today=self.today, week_start=week_start)

    def _convert_dates(self, parsed: ParsedAttributes) -> None:
        attributes = parsed.attributes
        for key, value in list(attributes.items()):
            if isinstance(value, str):
                resolved = self._resolve(value)
                if resolved is not None:
                    attributes[key] = resolved
        # A date shortcut wins over a written due date wherever it appears.
        for key, value in list(attributes.items()):
            if value is True:
                resolved = self._resolve(key)
                if resolved is not None:
                    del attributes[key]
                    attributes[self.due_date_attribute] = resolved

    def _convert_priorities(self, parsed: ParsedAttributes) -> None:
        attributes = parsed.attributes
        for key in list(attributes):
            if key.lower() in PRIORITY_SHORTCUTS:
                del attributes[key]
                attributes["priority"] = key.lower()
