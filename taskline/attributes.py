"""Extract ``[key:: value]`` fields, ``@shortcuts`` and ``#tags`` from task text."""

from __future__ import annotations

import re
from datetime import date

from .config import Settings
from .dates import resolve_date
from .models import AttributeValue, ParsedAttributes

PRIORITY_SHORTCUTS = ("critical", "high", "medium", "low", "lowest")

# Bracketed field, or an @shortcut that is not part of a [[@wiki link]].
RE_ATTRIBUTE = re.compile(
    r"\[(?P<key>[^:\]]+)::(?P<value>[^\]]+)\]"
    r"|(?<!\[)@(?P<word>\w+)(?:\((?P<arg>[^)]*)\)|(?![(\w]))"
)
RE_HASHTAG = re.compile(r"#([a-zA-Z][a-zA-Z0-9_-]*)")
RE_WIKI_LINK = re.compile(r"\[\[.*?\]\]")
RE_WHITESPACE = re.compile(r"\s+")


class AttributeParser:
    """Parses and serializes the attribute part of a task line.

    Without settings every ``@word`` is accepted as a boolean attribute.
    With settings, the shortcut policy decides which keywords are recognized;
    unrecognized ones stay in the text.
    """

    def __init__(self, settings: Settings | None = None, today: date | None = None) -> None:
        self.settings = settings
        self.today = today

    def parse_attributes(self, text: str) -> ParsedAttributes:
        attributes: dict[str, AttributeValue] = {}
        removed = False

        def take(m: re.Match[str]) -> str:
            nonlocal removed
            parsed = self._parse_match(m)
            if parsed is None:
                return m.group(0)
            key, value = parsed
            if not key:
                return m.group(0)
            attributes[key] = value
            removed = True
            return ""

        stripped = RE_ATTRIBUTE.sub(take, text)
        if removed:
            stripped = RE_WHITESPACE.sub(" ", stripped).strip()

        return ParsedAttributes(text=stripped, attributes=attributes, tags=parse_hashtags(text))

    def attributes_to_string(self, parsed: ParsedAttributes) -> str:
        fields = " ".join(
            attribute_to_string(key, value)
            for key, value in parsed.attributes.items()
            if value is not False and value is not None
        )
        if not fields:
            return parsed.text
        return f"{parsed.text} {fields}".strip()

    # ------------------------------------------------------------------
    # Shortcut policy
    # ------------------------------------------------------------------

    def _parse_match(self, m: re.Match[str]) -> tuple[str, AttributeValue] | None:
        if m.group("key") is not None:
            value = m.group("value").strip()
            return m.group("key").strip(), True if value == "true" else value

        keyword = m.group("word").lower()
        arg = m.group("arg")
        shortcuts = self.settings.shortcuts if self.settings is not None else None

        if shortcuts is not None and not shortcuts.enabled:
            return None

        if arg is not None:
            arg = arg.strip()
            return keyword, arg if arg else True

        if shortcuts is None:
            if keyword in PRIORITY_SHORTCUTS:
                return "priority", keyword
            return keyword, True

        # Priority is checked first, so it shadows a custom shortcut of the same name.
        if shortcuts.priorities and keyword in PRIORITY_SHORTCUTS:
            return "priority", keyword

        if shortcuts.dates and resolve_date(
            keyword, today=self.today, week_start=self.settings.first_weekday
        ) is not None:
            return keyword, True

        if shortcuts.builtins and keyword == "selected":
            return self.settings.selected_attribute, True

        custom = shortcuts.find_custom(keyword)
        if custom is not None:
            return custom.target_attribute, custom.value

        return None


def attribute_to_string(key: str, value: AttributeValue) -> str:
    if isinstance(value, bool):
        return f"[{key}:: true]"
    return f"[{key}:: {value}]"


def parse_hashtags(text: str) -> list[str]:
    """Tags in first-seen order, ignoring pure numbers and ``[[wiki links]]``."""
    visible = RE_WIKI_LINK.sub(lambda m: " " * len(m.group(0)), text)
    tags: list[str] = []
    for tag in RE_HASHTAG.findall(visible):
        if tag not in tags:
            tags.append(tag)
    return tags
