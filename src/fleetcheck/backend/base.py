"""Backend protocol shared by the store, the session manager and wrappers."""

from __future__ import annotations

from typing import Protocol


class KeyValueBackend(Protocol):
    """Structural backend interface.

    ``get`` returns ``None`` for an absent key.  Any method may raise
    :class:`~fleetcheck.exceptions.BackendError`; callers decide whether a
    failure is fatal (writes) or read as absent (reads).
    """

    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str) -> None: ...

    async def remove(self, key: str) -> None: ...
