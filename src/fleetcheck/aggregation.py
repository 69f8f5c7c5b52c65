"""Non-conformance counting over checklist records.

Every list view, card and document export counts non-conforming items
through this module.  An item is non-conforming when its status is
``regular`` or ``bad``; an item that has not been inspected yet
(``status is None``) never counts against the record.

All functions are pure and O(items).
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum

from fleetcheck.models.checklist import ChecklistSection, ItemStatus, VehicleChecklistRecord

_SEVERITY: dict[ItemStatus | None, int] = {
    None: 0,
    ItemStatus.OK: 1,
    ItemStatus.REGULAR: 2,
    ItemStatus.BAD: 3,
}


class StatusGlyph(StrEnum):
    UNKNOWN = "unknown"
    PASS = "pass"
    WARN = "warn"
    FAIL = "fail"

    @property
    def emoji(self) -> str:
        return _GLYPH_EMOJI[self]


_GLYPH_EMOJI: dict[StatusGlyph, str] = {
    StatusGlyph.UNKNOWN: "❓",
    StatusGlyph.PASS: "✅",
    StatusGlyph.WARN: "⚠️",
    StatusGlyph.FAIL: "❌",
}

_STATUS_GLYPH: dict[ItemStatus | None, StatusGlyph] = {
    None: StatusGlyph.UNKNOWN,
    ItemStatus.OK: StatusGlyph.PASS,
    ItemStatus.REGULAR: StatusGlyph.WARN,
    ItemStatus.BAD: StatusGlyph.FAIL,
}


@dataclass(frozen=True, slots=True)
class SectionSummary:
    section_id: str
    total_items: int
    not_ok_count: int
    inspected_count: int = 0


@dataclass(frozen=True, slots=True)
class RecordSummary:
    """Per-section and whole-record counts for one record."""

    record_id: str
    sections: tuple[SectionSummary, ...]

    @property
    def total_items(self) -> int:
        return sum(s.total_items for s in self.sections)

    @property
    def not_ok_count(self) -> int:
        return sum(s.not_ok_count for s in self.sections)

    @property
    def inspected_count(self) -> int:
        return sum(s.inspected_count for s in self.sections)

    @property
    def all_ok(self) -> bool:
        return self.not_ok_count == 0


def is_non_conforming(status: ItemStatus | None) -> bool:
    return status is ItemStatus.REGULAR or status is ItemStatus.BAD


def section_summary(section: ChecklistSection) -> SectionSummary:
    not_ok = 0
    inspected = 0
    for item in section.items:
        if item.status is not None:
            inspected += 1
        if is_non_conforming(item.status):
            not_ok += 1
    return SectionSummary(
        section_id=section.id,
        total_items=len(section.items),
        not_ok_count=not_ok,
        inspected_count=inspected,
    )


def record_not_ok_count(record: VehicleChecklistRecord) -> int:
    return sum(section_summary(section).not_ok_count for section in record.sections)


def record_summary(record: VehicleChecklistRecord) -> RecordSummary:
    return RecordSummary(
        record_id=record.id,
        sections=tuple(section_summary(section) for section in record.sections),
    )


def status_glyph(status: ItemStatus | None) -> StatusGlyph:
    return _STATUS_GLYPH[status]


def severity(status: ItemStatus | None) -> int:
    """Rank for sorting: unset < ok < regular < bad."""
    return _SEVERITY[status]


def worst_status(statuses: Iterable[ItemStatus | None]) -> ItemStatus | None:
    """Most severe status in *statuses*; ``None`` if empty or all unset."""
    worst: ItemStatus | None = None
    for status in statuses:
        if severity(status) > severity(worst):
            worst = status
    return worst
