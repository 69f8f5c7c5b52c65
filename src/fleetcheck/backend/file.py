"""Directory backend: one UTF-8 file per key."""

from __future__ import annotations

import asyncio
import logging
import os
import re
import tempfile
from pathlib import Path

from fleetcheck._redact import describe_value
from fleetcheck.exceptions import BackendError

_logger = logging.getLogger(__name__)

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._@:-]{0,127}$")


def _atomic_write(path: Path, value: str) -> None:
    """Write *value* to a temp file in the same directory, then replace."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=str(path.parent), prefix=f".{path.name}.", suffix=".tmp")
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(value)
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(tmp_path, path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise


class FileBackend:
    """Persist each key as ``<root>/<key>.json``.

    Writes go through a temp file and :func:`os.replace`, so a reader never
    observes a half-written collection.  Blocking I/O runs in a worker
    thread.
    """

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root)

    @property
    def root(self) -> Path:
        return self._root

    def _path(self, key: str) -> Path:
        if not _KEY_PATTERN.match(key):
            raise BackendError(f"Invalid backend key: {key!r}", key=key)
        return self._root / f"{key}.json"

    async def get(self, key: str) -> str | None:
        path = self._path(key)
        try:
            value = await asyncio.to_thread(path.read_text, encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as exc:
            raise BackendError(f"Read of {key} failed: {exc}", key=key, operation="get") from exc
        _logger.debug("GET %s -> %s", key, describe_value(key, value))
        return value

    async def set(self, key: str, value: str) -> None:
        path = self._path(key)
        _logger.debug("SET %s <- %s", key, describe_value(key, value))
        try:
            await asyncio.to_thread(_atomic_write, path, value)
        except OSError as exc:
            raise BackendError(f"Write of {key} failed: {exc}", key=key, operation="set") from exc

    async def remove(self, key: str) -> None:
        path = self._path(key)
        _logger.debug("REMOVE %s", key)
        try:
            await asyncio.to_thread(path.unlink, missing_ok=True)
        except OSError as exc:
            raise BackendError(f"Remove of {key} failed: {exc}", key=key, operation="remove") from exc
