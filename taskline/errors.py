"""Exceptions raised at the I/O and configuration boundaries."""

from __future__ import annotations

from typing import Any, Literal

ErrorTier = Literal["CRITICAL", "HIGH", "MEDIUM", "LOW"]


class TaskPlannerError(Exception):
    """Base class for all taskline errors."""

    def __init__(
        self,
        message: str,
        tier: ErrorTier,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.tier = tier
        self.context: dict[str, Any] = dict(context or {})


class FileOperationError(TaskPlannerError):
    """Reading or writing a file through its adapter failed."""

    def __init__(
        self,
        message: str,
        file_path: str,
        operation: Literal["read", "write"],
        tier: ErrorTier = "HIGH",
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message,
            tier,
            {**(context or {}), "file_path": file_path, "operation": operation},
        )
        self.file_path = file_path
        self.operation = operation

    def __str__(self) -> str:
        original = self.context.get("original_error")
        if original:
            return f"{self.message}: {original}"
        return self.message


class ConfigError(TaskPlannerError):
    """A settings file could not be loaded."""

    def __init__(self, message: str, path: str) -> None:
        super().__init__(message, "MEDIUM", {"path": path})
        self.path = path
