from __future__ import annotations

from datetime import UTC, datetime, timedelta

from fleetcheck.models import Role, VehicleChecklistRecord, new_record
from fleetcheck.session import Session
from fleetcheck.visibility import sort_newest_first, visible_records

_T0 = datetime(2026, 4, 1, tzinfo=UTC)


def _record(record_id: str, user_id: str, minutes: int = 0) -> VehicleChecklistRecord:
    return new_record(record_id=record_id, user_id=user_id, now=_T0 + timedelta(minutes=minutes))


_RECORDS = [
    _record("1", "u1"),
    _record("2", "u2"),
    _record("3", "u1"),
    _record("4", ""),
    _record("5", "u1"),
]


def test_user_sees_own_records_in_order() -> None:
    session = Session(subject_id="u1", email="u1@x.com", role=Role.USER)
    assert [r.id for r in visible_records(_RECORDS, session)] == ["1", "3", "5"]


def test_user_with_no_records_sees_nothing() -> None:
    session = Session(subject_id="u3", email="u3@x.com", role=Role.USER)
    assert visible_records(_RECORDS, session) == []


def test_admin_sees_everything_unchanged() -> None:
    session = Session(subject_id="admin-001", email="admin@example.com", role=Role.ADMIN)
    assert visible_records(_RECORDS, session) == _RECORDS


def test_no_session_sees_nothing() -> None:
    assert visible_records(_RECORDS, None) == []


def test_sort_newest_first_is_stable() -> None:
    records = [_record("a", "u1", 0), _record("b", "u1", 5), _record("c", "u1", 5), _record("d", "u1", 1)]
    assert [r.id for r in sort_newest_first(records)] == ["b", "c", "d", "a"]
