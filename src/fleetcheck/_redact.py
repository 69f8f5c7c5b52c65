"""Helpers for safe debug logging.

fleetcheck handles session credentials, passwords and signatures.  Backend
traffic is logged at DEBUG only after passing through
:func:`redact_for_log`.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

_SENSITIVE_VALUE_KEYS: frozenset[str] = frozenset(
    {
        "password",
        "token",
        "session",
        "credential",
        "encryptionkey",
        "driversignature",
        "inspectorsignature",
    }
)


def redact_for_log(value: Any, *, max_string: int = 256, _depth: int = 0) -> Any:
    """Return a redacted copy of *value* suitable for debug logs."""
    if _depth > 20:
        return "<max-depth>"

    if value is None:
        return None

    if isinstance(value, str):
        if len(value) > max_string:
            return f"{value[:max_string]}…<truncated>"
        return value

    if isinstance(value, (int, float, bool)):
        return value

    if isinstance(value, bytes):
        return f"<bytes:{len(value)}b>"

    if isinstance(value, Mapping):
        redacted: dict[str, Any] = {}
        for k, v in value.items():
            key = str(k)
            if key.lower().replace("_", "") in _SENSITIVE_VALUE_KEYS:
                redacted[key] = "<redacted>"
            else:
                redacted[key] = redact_for_log(v, max_string=max_string, _depth=_depth + 1)
        return redacted

    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return [redact_for_log(v, max_string=max_string, _depth=_depth + 1) for v in value]

    return repr(value)


def describe_value(key: str, value: str | None, *, secure_keys: frozenset[str] = frozenset()) -> str:
    """Short description of a backend value for DEBUG logs."""
    if value is None:
        return "<absent>"
    if key in secure_keys or key.lower() in _SENSITIVE_VALUE_KEYS:
        return f"<redacted:{len(value)} chars>"
    return f"<{len(value)} chars>"
