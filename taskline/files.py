"""File access backends used by the parser and the writeback engine."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol, runtime_checkable

import httpx

from .errors import FileOperationError

logger = logging.getLogger(__name__)

HTTP_TIMEOUT = 30.0


@runtime_checkable
class FileAdapter(Protocol):
    """Anything with a path that can read and write its whole content."""

    @property
    def path(self) -> str: ...

    def read(self) -> str: ...

    def write(self, content: str) -> None: ...


class LocalFile:
    """A file on the local filesystem.

    Newline translation is disabled in both directions so ``\\r\\n`` files
    keep their line endings.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> str:
        return str(self._path)

    def read(self) -> str:
        with self._path.open(encoding="utf-8", newline="") as fh:
            return fh.read()

    def write(self, content: str) -> None:
        with self._path.open("w", encoding="utf-8", newline="") as fh:
            fh.write(content)

    def __repr__(self) -> str:
        return f"LocalFile({self.path!r})"


class MemoryFile:
    """An in-memory file that records how often it was read and written."""

    def __init__(self, path: str, content: str = "") -> None:
        self._path = path
        self.content = content
        self.reads = 0
        self.writes = 0

    @property
    def path(self) -> str:
        return self._path

    def read(self) -> str:
        self.reads += 1
        return self.content

    def write(self, content: str) -> None:
        self.writes += 1
        self.content = content

    def __repr__(self) -> str:
        return f"MemoryFile({self.path!r})"


class HttpFile:
    """A document on a remote store: GET reads it, PUT replaces it."""

    def __init__(
        self,
        url: str,
        token: str | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self.url = url
        headers = {"Content-Type": "text/markdown; charset=utf-8"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=HTTP_TIMEOUT)
        self._headers = headers

    @property
    def path(self) -> str:
        return self.url

    def read(self) -> str:
        resp = self._client.get(self.url, headers=self._headers)
        resp.raise_for_status()
        logger.debug("GET %s -> %d bytes", self.url, len(resp.content))
        return resp.text

    def write(self, content: str) -> None:
        resp = self._client.put(
            self.url, content=content.encode("utf-8"), headers=self._headers
        )
        resp.raise_for_status()
        logger.debug("PUT %s <- %d chars", self.url, len(content))

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __repr__(self) -> str:
        return f"HttpFile({self.url!r})"


def open_file(location: str, token: str | None = None) -> LocalFile | HttpFile:
    """Pick a backend for a path or ``http(s)://`` URL."""
    if location.startswith(("http://", "https://")):
        return HttpFile(location, token=token)
    return LocalFile(location)


def read_content(file: FileAdapter, **context: object) -> str:
    """Read through an adapter, raising FileOperationError on any failure."""
    try:
        return file.read()
    except Exception as exc:
        raise FileOperationError(
            f"Failed to read file: {file.path}",
            file.path,
            "read",
            context={**context, "original_error": str(exc)},
        ) from exc


def write_content(file: FileAdapter, content: str, **context: object) -> None:
    """Write through an adapter, raising FileOperationError on any failure."""
    try:
        file.write(content)
    except Exception as exc:
        raise FileOperationError(
            f"Failed to write file: {file.path}",
            file.path,
            "write",
            context={**context, "original_error": str(exc)},
        ) from exc
