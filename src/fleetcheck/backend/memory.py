"""In-process backend."""

from __future__ import annotations

import copy


class MemoryBackend:
    """Dict-backed backend; data lives as long as the instance."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> str | None:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def snapshot(self) -> dict[str, str]:
        """Copy of every stored key (for inspection in tools and tests)."""
        return copy.deepcopy(self._data)
