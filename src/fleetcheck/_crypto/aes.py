"""AES-256-GCM sealing for values stored at rest.

Sealed values are text: ``v1:`` followed by URL-safe base64 of
``nonce || ciphertext || tag``.  The backend key is bound as associated
data so a value copied under another key fails to open.
"""

from __future__ import annotations

import base64
import binascii
import secrets

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from fleetcheck.exceptions import FleetCheckCryptoError

SEALED_PREFIX = "v1:"
_NONCE_BYTES = 12


def parse_key_hex(value: str) -> bytes:
    """Parse a 64-character hex key into 32 raw bytes."""
    text = value.strip()
    if text.startswith("0x") or text.startswith("0X"):
        text = text[2:]
    if not text:
        raise FleetCheckCryptoError("AES key is empty")
    try:
        data = bytes.fromhex(text)
    except ValueError as exc:
        raise FleetCheckCryptoError("AES key must be hex-encoded") from exc
    if len(data) != 32:
        raise FleetCheckCryptoError(f"AES key must be 32 bytes (got {len(data)})")
    return data


def seal_text(plaintext: str, key: bytes, *, associated: str = "") -> str:
    """Encrypt *plaintext* and return the sealed text form.

    Raises
    ------
    FleetCheckCryptoError
        If encryption fails.
    """
    try:
        nonce = secrets.token_bytes(_NONCE_BYTES)
        ct = AESGCM(key).encrypt(nonce, plaintext.encode("utf-8"), associated.encode("utf-8"))
    except Exception as exc:
        raise FleetCheckCryptoError(f"AES-GCM encryption failed: {exc}") from exc
    return SEALED_PREFIX + base64.urlsafe_b64encode(nonce + ct).decode("ascii")


def open_text(sealed: str, key: bytes, *, associated: str = "") -> str:
    """Decrypt a value produced by :func:`seal_text`.

    Raises
    ------
    FleetCheckCryptoError
        If the value is not sealed, was tampered with, or the key is wrong.
    """
    if not sealed.startswith(SEALED_PREFIX):
        raise FleetCheckCryptoError("value is not sealed")
    try:
        blob = base64.urlsafe_b64decode(sealed[len(SEALED_PREFIX) :].encode("ascii"))
    except (binascii.Error, UnicodeEncodeError) as exc:
        raise FleetCheckCryptoError("sealed value is not valid base64") from exc
    if len(blob) <= _NONCE_BYTES:
        raise FleetCheckCryptoError("sealed value is truncated")
    nonce, ct = blob[:_NONCE_BYTES], blob[_NONCE_BYTES:]
    try:
        plaintext = AESGCM(key).decrypt(nonce, ct, associated.encode("utf-8"))
    except InvalidTag as exc:
        raise FleetCheckCryptoError("sealed value failed authentication") from exc
    try:
        return plaintext.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise FleetCheckCryptoError("sealed value is not UTF-8") from exc
