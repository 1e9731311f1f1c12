"""Settings injected into the attribute parser, converter and writeback engine."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

from .errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "TASKLINE_CONFIG"


@dataclass(frozen=True)
class CustomShortcut:
    """Maps ``@keyword`` to ``[target_attribute:: value]``."""

    keyword: str
    target_attribute: str
    value: str | bool = True


@dataclass(frozen=True)
class ShortcutSettings:
    enabled: bool = True
    dates: bool = True
    priorities: bool = True
    builtins: bool = True
    custom: tuple[CustomShortcut, ...] = ()

    def find_custom(self, keyword: str) -> CustomShortcut | None:
        lowered = keyword.lower()
        for shortcut in self.custom:
            if shortcut.keyword.lower() == lowered:
                return shortcut
        return None


@dataclass(frozen=True)
class Settings:
    """Attribute names and shortcut policy.

    ``first_weekday`` uses Python weekday numbers (Monday is 0).
    """

    due_date_attribute: str = "due"
    completed_date_attribute: str = "completed"
    selected_attribute: str = "selected"
    first_weekday: int = 0
    shortcuts: ShortcutSettings = field(default_factory=ShortcutSettings)


def settings_from_dict(data: dict[str, Any]) -> Settings:
    """Build Settings from a plain dict, ignoring unknown keys."""
    known = {f.name for f in fields(Settings)} - {"shortcuts"}
    kwargs: dict[str, Any] = {k: v for k, v in data.items() if k in known}

    raw_shortcuts = data.get("shortcuts")
    if isinstance(raw_shortcuts, dict):
        flags = {f.name for f in fields(ShortcutSettings)} - {"custom"}
        shortcut_kwargs: dict[str, Any] = {
            k: bool(v) for k, v in raw_shortcuts.items() if k in flags
        }
        shortcut_kwargs["custom"] = tuple(
            CustomShortcut(
                keyword=str(entry["keyword"]),
                target_attribute=str(entry["target_attribute"]),
                value=entry.get("value", True),
            )
            for entry in raw_shortcuts.get("custom", [])
            if "keyword" in entry and "target_attribute" in entry
        )
        kwargs["shortcuts"] = ShortcutSettings(**shortcut_kwargs)

    return Settings(**kwargs)


def load_settings(path: str | Path | None = None) -> Settings:
    """Load settings from a JSON file.

    Falls back to ``$TASKLINE_CONFIG`` when no path is given, and to the
    defaults when neither names an existing file.
    """
    if path is None:
        path = os.environ.get(CONFIG_ENV_VAR)
    if not path:
        return Settings()

    p = Path(path)
    if not p.is_file():
        logger.debug("Settings file %s not found; using defaults", p)
        return Settings()

    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Could not load settings from {p}: {exc}", str(p)) from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Settings file {p} must contain a JSON object", str(p))

    logger.debug("Loaded settings from %s", p)
    return settings_from_dict(data)
