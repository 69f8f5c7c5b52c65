"""Encryption-at-rest wrapper for any backend."""

from __future__ import annotations

import logging

from fleetcheck._crypto.aes import open_text, parse_key_hex, seal_text
from fleetcheck.backend.base import KeyValueBackend
from fleetcheck.exceptions import BackendError, FleetCheckCryptoError

_logger = logging.getLogger(__name__)


class EncryptedBackend:
    """Seal values with AES-256-GCM before handing them to *inner*.

    This protects the account registry and the session credential on disk
    the way a platform secure store does.  It says nothing about who minted
    a credential; decoded sessions are still trusted as-is.

    A stored value that cannot be opened (wrong key, tampering, plaintext
    left over from before encryption was enabled) surfaces as
    :class:`BackendError` from :meth:`get`.
    """

    def __init__(self, inner: KeyValueBackend, key_hex: str) -> None:
        self._inner = inner
        try:
            self._key = parse_key_hex(key_hex)
        except FleetCheckCryptoError as exc:
            raise BackendError(f"Invalid encryption key: {exc}") from exc

    async def get(self, key: str) -> str | None:
        sealed = await self._inner.get(key)
        if sealed is None:
            return None
        try:
            return open_text(sealed, self._key, associated=key)
        except FleetCheckCryptoError as exc:
            _logger.debug("Could not open %s: %s", key, exc)
            raise BackendError(f"Could not decrypt {key}: {exc}", key=key, operation="get") from exc

    async def set(self, key: str, value: str) -> None:
        try:
            sealed = seal_text(value, self._key, associated=key)
        except FleetCheckCryptoError as exc:
            raise BackendError(f"Could not encrypt {key}: {exc}", key=key, operation="set") from exc
        await self._inner.set(key, sealed)

    async def remove(self, key: str) -> None:
        await self._inner.remove(key)
