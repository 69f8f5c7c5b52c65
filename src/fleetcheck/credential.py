"""Self-issued session credentials.

A credential is the compact JSON payload ``{sub, email, name, role, iat}``
encoded as UTF-8 and then standard base64.  Nothing is signed: any holder can
read it, and any well-formed string is accepted.  This is a simulated
session, not authentication.
"""

from __future__ import annotations

import base64
import binascii
import json
import math
import time
from datetime import UTC, datetime
from typing import Any

from pydantic import ValidationError

from fleetcheck.exceptions import CredentialDecodeError
from fleetcheck.models.account import Account, Role
from fleetcheck.session import Session


def _now_ms() -> int:
    return int(time.time() * 1000)


def build_payload(account: Account, *, issued_at: int | None = None) -> dict[str, Any]:
    return {
        "sub": account.id,
        "email": account.email,
        "name": account.name,
        "role": account.role.value,
        "iat": _now_ms() if issued_at is None else issued_at,
    }


def mint(account: Account, *, issued_at: int | None = None) -> str:
    """Encode a credential for *account*."""
    payload = build_payload(account, issued_at=issued_at)
    text = json.dumps(payload, separators=(",", ":"), ensure_ascii=False)
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def decode_payload(token: str) -> dict[str, Any]:
    """Strictly decode *token* into its payload dict.

    Raises
    ------
    CredentialDecodeError
        On bad padding, characters outside the base64 alphabet, non-UTF-8
        bytes, non-JSON text, or a payload that is not a JSON object.
    """
    if not isinstance(token, str) or not token.strip():
        raise CredentialDecodeError("credential is empty")
    try:
        raw = base64.b64decode(token.strip().encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError) as exc:
        raise CredentialDecodeError(f"credential is not base64: {exc}") from exc
    try:
        payload = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise CredentialDecodeError(f"credential payload is not JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise CredentialDecodeError("credential payload is not an object")
    return payload


def decode_session_strict(token: str) -> Session:
    """Decode *token* into a :class:`Session`, raising on any defect."""
    payload = decode_payload(token)
    iat = payload.get("iat", 0)
    if isinstance(iat, bool) or not isinstance(iat, (int, float)) or not math.isfinite(iat):
        raise CredentialDecodeError("credential iat is not a number")
    try:
        datetime.fromtimestamp(iat / 1000, tz=UTC)
    except (OverflowError, OSError, ValueError) as exc:
        raise CredentialDecodeError(f"credential iat is out of range: {iat!r}") from exc
    for field_name in ("sub", "email"):
        value = payload.get(field_name)
        if not isinstance(value, str) or not value.strip():
            raise CredentialDecodeError(f"credential {field_name} is missing")
    try:
        return Session(
            subject_id=payload.get("sub"),
            email=payload.get("email"),
            name=payload.get("name") or "",
            role=Role(payload.get("role")),
            issued_at=int(iat),
            token=token.strip(),
        )
    except (ValueError, ValidationError) as exc:
        raise CredentialDecodeError(f"credential payload is not account-shaped: {exc}") from exc


def decode_session(token: str | None) -> Session | None:
    """Decode *token*; ``None`` when absent or malformed.  Never raises."""
    if token is None:
        return None
    try:
        return decode_session_strict(token)
    except CredentialDecodeError:
        return None


def decode(token: str | None) -> Account | None:
    """Decode *token* into an Account-shaped value; ``None`` on malformed input."""
    session = decode_session(token)
    return session.account() if session is not None else None
