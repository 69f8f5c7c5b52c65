"""Fixed section catalog and record seeding."""

from __future__ import annotations

import time
from datetime import datetime

from fleetcheck.models._base import parse_timestamp, utcnow
from fleetcheck.models.checklist import ChecklistItem, ChecklistSection, VehicleChecklistRecord

# (section id, title, emoji, ((item id, item name), ...))
CatalogEntry = tuple[str, str, str, tuple[tuple[str, str], ...]]

SECTION_CATALOG: tuple[CatalogEntry, ...] = (
    (
        "mechanical",
        "MECHANICAL ITEMS",
        "🔧",
        (
            ("oil", "Engine oil level"),
            ("coolant", "Radiator water level (coolant)"),
            ("brake_fluid", "Brake fluid level"),
            ("power_steering", "Power steering fluid level"),
            ("transmission_oil", "Transmission oil level (when applicable)"),
            ("leaks", "Leaks (oil, water, fuel)"),
            ("clutch", "Clutch condition"),
            ("brakes", "Foot brake and handbrake operation"),
            ("noises", "Abnormal engine or gearbox noises"),
        ),
    ),
    (
        "electrical",
        "ELECTRICAL SYSTEM",
        "⚡",
        (
            ("headlights", "Headlights (high and low beam)"),
            ("rear_lights", "Rear and front position lights"),
            ("brake_light", "Brake light"),
            ("reverse_light", "Reverse light"),
            ("turn_signals", "Hazard lights and turn signals"),
            ("interior_light", "Interior lighting"),
            ("dashboard", "Instrument panel working correctly"),
            ("horn", "Horn"),
        ),
    ),
    (
        "external",
        "EXTERIOR AND STRUCTURE",
        "🚘",
        (
            ("tires", "Tyre condition (wear and pressure)"),
            ("spare_tire", "Spare tyre in good condition"),
            ("tools", "Jack and wheel wrench available"),
            ("bumpers", "Bumpers and mirrors intact"),
            ("wipers", "Windscreen wipers and washer working"),
            ("glass", "Windows and windscreen free of cracks"),
            ("doors", "Doors, locks and power windows working"),
        ),
    ),
    (
        "interior",
        "VEHICLE INTERIOR",
        "🪑",
        (
            ("seatbelts", "Seat belts working"),
            ("seats", "Seats and adjustments in good condition"),
            ("mats", "Floor mats fixed and clean"),
            ("ac", "Air conditioning/ventilation working"),
            ("fire_extinguisher", "Fire extinguisher (expiry and seal)"),
            ("triangle", "Warning triangle"),
            ("documents", "Vehicle and driver documents"),
        ),
    ),
)


def seed_sections(catalog: tuple[CatalogEntry, ...] = SECTION_CATALOG) -> tuple[ChecklistSection, ...]:
    """Fresh, uninspected sections for a new record."""
    return tuple(
        ChecklistSection(
            id=section_id,
            title=title,
            emoji=emoji,
            items=tuple(ChecklistItem(id=item_id, name=name) for item_id, name in items),
        )
        for section_id, title, emoji, items in catalog
    )


def new_record_id(now: datetime | None = None) -> str:
    """Time-based record id (epoch milliseconds)."""
    if now is None:
        return str(time.time_ns() // 1_000_000)
    return str(int(now.timestamp() * 1000))


def new_record(
    *,
    record_id: str | None = None,
    user_id: str = "",
    now: datetime | None = None,
    catalog: tuple[CatalogEntry, ...] = SECTION_CATALOG,
) -> VehicleChecklistRecord:
    """Seed a blank record from *catalog*.

    ``date`` and ``time`` default to *now* (``YYYY-MM-DD`` and ``HH:MM``).
    """
    stamp = parse_timestamp(now) if now is not None else utcnow()
    return VehicleChecklistRecord(
        id=record_id or new_record_id(stamp),
        user_id=user_id,
        date=stamp.strftime("%Y-%m-%d"),
        time=stamp.strftime("%H:%M"),
        sections=seed_sections(catalog),
        created_at=stamp,
        updated_at=stamp,
    )
