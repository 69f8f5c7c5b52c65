"""Encryption at rest for the secure backend keys."""

from __future__ import annotations

from fleetcheck._crypto.aes import SEALED_PREFIX, open_text, parse_key_hex, seal_text

__all__ = [
    "SEALED_PREFIX",
    "open_text",
    "parse_key_hex",
    "seal_text",
]
