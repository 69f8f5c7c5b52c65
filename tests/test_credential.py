from __future__ import annotations

import base64
import json
from datetime import UTC, datetime

import pytest

from fleetcheck.credential import decode, decode_session, decode_session_strict, mint
from fleetcheck.exceptions import CredentialDecodeError
from fleetcheck.models.account import Account, Role


def _account(**overrides: object) -> Account:
    fields: dict[str, object] = {
        "id": "1731400000000",
        "email": "ana@example.com",
        "name": "Ana",
        "role": Role.USER,
        "created_at": datetime(2026, 1, 1, tzinfo=UTC),
    }
    fields.update(overrides)
    return Account(**fields)


def _b64(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def test_round_trip_preserves_identity_fields() -> None:
    account = _account()
    decoded = decode(mint(account))
    assert decoded is not None
    assert (decoded.id, decoded.email, decoded.name, decoded.role) == (
        account.id,
        account.email,
        account.name,
        account.role,
    )


def test_round_trip_with_non_ascii_name() -> None:
    account = _account(name="João Ñandú 🚗", role=Role.ADMIN)
    decoded = decode(mint(account))
    assert decoded is not None
    assert decoded.name == "João Ñandú 🚗"
    assert decoded.role is Role.ADMIN


def test_token_is_base64_of_compact_json() -> None:
    token = mint(_account(), issued_at=1_700_000_000_000)
    payload = json.loads(base64.b64decode(token).decode("utf-8"))
    assert payload == {
        "sub": "1731400000000",
        "email": "ana@example.com",
        "name": "Ana",
        "role": "user",
        "iat": 1_700_000_000_000,
    }
    assert " " not in base64.b64decode(token).decode("utf-8")


def test_decode_session_carries_token_and_issue_time() -> None:
    token = mint(_account(), issued_at=1_700_000_000_000)
    session = decode_session(token)
    assert session is not None
    assert session.subject_id == "1731400000000"
    assert session.token == token
    assert session.issued_at == 1_700_000_000_000
    assert not session.is_admin


def test_forged_credential_is_accepted() -> None:
    # Credentials are unsigned; a hand-built payload decodes like a minted one.
    forged = _b64(json.dumps({"sub": "x", "email": "eve@example.com", "name": "Eve", "role": "admin", "iat": 0}))
    session = decode_session(forged)
    assert session is not None
    assert session.is_admin


@pytest.mark.parametrize(
    "token",
    [
        "",
        "   ",
        "abc",
        "not base64!!",
        "YWJj",
        _b64("[1, 2, 3]"),
        _b64('"just a string"'),
        _b64('{"sub": "1", "email": "a@x.com", "role": "root", "iat": 0}'),
        _b64('{"email": "a@x.com", "role": "user", "iat": 0}'),
        _b64('{"sub": "1", "email": "", "role": "user", "iat": 0}'),
        _b64('{"sub": "1", "email": "a@x.com", "role": "user", "iat": "yesterday"}'),
        _b64('{"sub": "1", "email": "a@x.com", "role": "user", "iat": 100000000000000000000}'),
        _b64('{"sub": "1", "email": "a@x.com", "role": "user", "iat": -1e300}'),
        base64.b64encode(b"\xff\xfe\xfd").decode("ascii"),
    ],
)
def test_malformed_tokens_decode_to_none(token: str) -> None:
    assert decode(token) is None
    assert decode_session(token) is None


def test_none_decodes_to_none() -> None:
    assert decode(None) is None
    assert decode_session(None) is None


def test_strict_decoder_raises() -> None:
    with pytest.raises(CredentialDecodeError):
        decode_session_strict("%%%")
