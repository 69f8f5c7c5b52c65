"""Role-scoped record visibility."""

from __future__ import annotations

from collections.abc import Iterable

from fleetcheck.models.checklist import VehicleChecklistRecord
from fleetcheck.session import Session


def visible_records(
    records: Iterable[VehicleChecklistRecord],
    session: Session | None,
) -> list[VehicleChecklistRecord]:
    """Records *session* may see, in their original order.

    Admins see everything.  Other accounts see only the records they
    authored.  Without a session nothing is visible.
    """
    if session is None:
        return []
    if session.is_admin:
        return list(records)
    return [record for record in records if record.user_id == session.subject_id]


def sort_newest_first(records: Iterable[VehicleChecklistRecord]) -> list[VehicleChecklistRecord]:
    """Stable sort by ``created_at``, newest first."""
    return sorted(records, key=lambda record: record.created_at, reverse=True)
