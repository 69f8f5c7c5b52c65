"""Key-value backends.

The store and the session manager only ever talk to a :class:`KeyValueBackend`.
The embedding platform chooses the concrete implementation; the ones shipped
here cover in-process use, a local data directory, a remote HTTP service,
and encryption at rest on top of any of them.
"""

from __future__ import annotations

import aiohttp

from fleetcheck.backend.base import KeyValueBackend
from fleetcheck.backend.encrypted import EncryptedBackend
from fleetcheck.backend.file import FileBackend
from fleetcheck.backend.http import HttpBackend
from fleetcheck.backend.memory import MemoryBackend
from fleetcheck.config import FleetCheckConfig


def build_backend(
    config: FleetCheckConfig,
    *,
    http_session: aiohttp.ClientSession | None = None,
) -> KeyValueBackend:
    """Pick the backend described by *config*.

    ``backend_url`` wins over ``data_dir``; with neither set the data lives
    in memory.  An :class:`HttpBackend` needs *http_session*.
    """
    if config.backend_url:
        if http_session is None:
            raise ValueError("backend_url is configured but no aiohttp session was given")
        return HttpBackend(config.backend_url, http_session)
    if config.data_dir is not None:
        return FileBackend(config.data_dir)
    return MemoryBackend()


def build_secure_backend(config: FleetCheckConfig, backend: KeyValueBackend) -> KeyValueBackend:
    """Wrap *backend* for the account registry and session keys.

    Returns *backend* unchanged when encryption is disabled.
    """
    if not config.encryption_enabled:
        return backend
    assert config.encryption_key is not None  # noqa: S101
    return EncryptedBackend(backend, config.encryption_key)


__all__ = [
    "EncryptedBackend",
    "FileBackend",
    "HttpBackend",
    "KeyValueBackend",
    "MemoryBackend",
    "build_backend",
    "build_secure_backend",
]
