"""Vehicle checklist record models.

A record's layout (which sections it has, and which items each section
holds) is fixed when the record is seeded from the catalog.  Only item
``status``/``notes``, ``section_notes`` and the header fields change
afterwards, and only through the ``with_*`` helpers below.
"""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import Any, Final, TypeVar

from pydantic import Field, ValidationError, field_validator, model_validator

from fleetcheck._constants import LEGACY_STATUS_ALIASES
from fleetcheck.exceptions import ChecklistStructureError, ChecklistValidationError
from fleetcheck.models._base import FleetBaseModel, Timestamp, parse_timestamp, utcnow


class ItemStatus(StrEnum):
    """Inspection outcome for a single item."""

    OK = "ok"
    REGULAR = "regular"
    BAD = "bad"


def coerce_status(value: Any) -> ItemStatus | None:
    """Normalize a persisted or user-supplied status.

    ``None`` and ``""`` mean "not yet inspected".  Legacy spellings are
    mapped to their current member.
    """
    if value is None or isinstance(value, ItemStatus):
        return value
    if isinstance(value, str):
        text = value.strip().lower()
        if not text:
            return None
        return ItemStatus(LEGACY_STATUS_ALIASES.get(text, text))
    raise ValueError(f"invalid item status: {value!r}")


_UNSET: Final = object()

_M = TypeVar("_M", bound=FleetBaseModel)


def _validated_copy(model: _M, changes: dict[str, Any]) -> _M:
    """Copy *model* with *changes* applied, running full validation.

    Raises
    ------
    ChecklistValidationError
        If a changed value has the wrong type; ``field`` names it.
    """
    try:
        return type(model).model_validate({**model.model_dump(), **changes})
    except ValidationError as exc:
        first = exc.errors()[0]
        field_name = str(first["loc"][0]) if first["loc"] else ""
        raise ChecklistValidationError(f"Invalid value for {field_name}: {first['msg']}", field=field_name) from exc


HEADER_FIELDS: frozenset[str] = frozenset(
    {
        "plate",
        "km",
        "driver",
        "date",
        "time",
        "general_notes",
        "driver_signature",
        "inspector_signature",
    }
)

Layout = tuple[tuple[str, tuple[str, ...]], ...]


class ChecklistItem(FleetBaseModel):
    id: str
    name: str
    status: ItemStatus | None = None
    notes: str = ""

    @field_validator("status", mode="before")
    @classmethod
    def _normalize_status(cls, value: Any) -> ItemStatus | None:
        return coerce_status(value)


class ChecklistSection(FleetBaseModel):
    id: str
    title: str
    emoji: str = ""
    items: tuple[ChecklistItem, ...] = ()
    section_notes: str = ""

    @model_validator(mode="after")
    def _unique_item_ids(self) -> ChecklistSection:
        ids = [item.id for item in self.items]
        if len(ids) != len(set(ids)):
            raise ValueError(f"duplicate item id in section {self.id!r}")
        return self

    def item(self, item_id: str) -> ChecklistItem:
        for item in self.items:
            if item.id == item_id:
                return item
        raise ChecklistStructureError(f"Section {self.id!r} has no item {item_id!r}")


class VehicleChecklistRecord(FleetBaseModel):
    """A single vehicle inspection.

    ``id`` is assigned at creation and never changes; store operations are
    upserts keyed by it.  ``user_id`` records authorship and is set once, on
    the first save.
    """

    id: str
    user_id: str = ""
    plate: str = ""
    km: str = ""
    driver: str = ""
    date: str = ""
    time: str = ""
    sections: tuple[ChecklistSection, ...] = ()
    general_notes: str = ""
    driver_signature: str = ""
    inspector_signature: str = ""
    created_at: Timestamp = Field(default_factory=utcnow)
    updated_at: Timestamp = Field(default_factory=utcnow)

    @field_validator("id")
    @classmethod
    def _non_empty_id(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("record id must be non-empty")
        return value

    @field_validator("km", mode="before")
    @classmethod
    def _km_as_text(cls, value: Any) -> Any:
        # Odometer readings typed as numbers by older clients.
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @model_validator(mode="after")
    def _check_invariants(self) -> VehicleChecklistRecord:
        ids = [section.id for section in self.sections]
        if len(ids) != len(set(ids)):
            raise ValueError(f"duplicate section id in record {self.id!r}")
        if self.updated_at < self.created_at:
            raise ValueError("updated_at must not be earlier than created_at")
        return self

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def section(self, section_id: str) -> ChecklistSection:
        for section in self.sections:
            if section.id == section_id:
                return section
        raise ChecklistStructureError(f"Record {self.id!r} has no section {section_id!r}")

    def layout(self) -> Layout:
        """Section and item ids in order; the part of a record that never changes."""
        return tuple((s.id, tuple(item.id for item in s.items)) for s in self.sections)

    # ------------------------------------------------------------------
    # Edits (each returns a new record)
    # ------------------------------------------------------------------

    def _replace_section(self, updated: ChecklistSection) -> VehicleChecklistRecord:
        sections = tuple(updated if s.id == updated.id else s for s in self.sections)
        return self.model_copy(update={"sections": sections})

    def with_item(
        self,
        section_id: str,
        item_id: str,
        *,
        status: Any = _UNSET,
        notes: str | None = None,
    ) -> VehicleChecklistRecord:
        """Set an item's status and/or notes.

        Pass ``status=None`` to reset an item to "not yet inspected".
        """
        section = self.section(section_id)
        item = section.item(item_id)
        changes: dict[str, Any] = {}
        if status is not _UNSET:
            changes["status"] = coerce_status(status)
        if notes is not None:
            changes["notes"] = notes
        if not changes:
            return self
        new_item = _validated_copy(item, changes)
        items = tuple(new_item if i.id == item_id else i for i in section.items)
        return self._replace_section(section.model_copy(update={"items": items}))

    def with_section_notes(self, section_id: str, notes: str) -> VehicleChecklistRecord:
        section = self.section(section_id)
        return self._replace_section(_validated_copy(section, {"section_notes": notes}))

    def with_details(self, **changes: Any) -> VehicleChecklistRecord:
        """Update header fields (plate, km, driver, date, time, notes, signatures)."""
        unknown = set(changes) - HEADER_FIELDS
        if unknown:
            raise ChecklistStructureError(f"Not an editable header field: {', '.join(sorted(unknown))}")
        return _validated_copy(self, changes)

    def with_author(self, user_id: str) -> VehicleChecklistRecord:
        """Stamp authorship unless the record already has an author."""
        if self.user_id or not user_id:
            return self
        return self.model_copy(update={"user_id": user_id})

    def touch(self, now: datetime | None = None) -> VehicleChecklistRecord:
        """Refresh ``updated_at`` (never earlier than ``created_at``)."""
        stamp = parse_timestamp(now) if now is not None else utcnow()
        return self.model_copy(update={"updated_at": max(stamp, self.created_at)})


def same_structure(a: VehicleChecklistRecord, b: VehicleChecklistRecord) -> bool:
    return a.layout() == b.layout()
