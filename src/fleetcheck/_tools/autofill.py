"""Fill a record with random inspection results for manual testing."""

from __future__ import annotations

import random

from fleetcheck.models.checklist import ItemStatus, VehicleChecklistRecord

_STATUSES: tuple[ItemStatus, ...] = (ItemStatus.OK, ItemStatus.REGULAR, ItemStatus.BAD)
_PLATE_LETTERS = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
_DRIVERS = ("João Silva", "Maria Souza", "Carlos Pereira", "Ana Oliveira")


def random_plate(rng: random.Random) -> str:
    letters = "".join(rng.choice(_PLATE_LETTERS) for _ in range(3))
    return f"{letters}{rng.randint(0, 9)}{rng.choice(_PLATE_LETTERS)}{rng.randint(10, 99)}"


def fill_random(record: VehicleChecklistRecord, rng: random.Random) -> VehicleChecklistRecord:
    """Random header, a status for every item, and occasional notes.

    The record's layout is untouched; only editable fields change.
    """
    filled = record.with_details(
        plate=random_plate(rng),
        km=str(rng.randint(1_000, 200_000)),
        driver=rng.choice(_DRIVERS),
        general_notes="Random test data." if rng.random() > 0.5 else "",
    )
    for section in record.sections:
        if rng.random() > 0.7:
            filled = filled.with_section_notes(section.id, f"Random note for {section.title}.")
        for item in section.items:
            notes = f"Note for {item.name}." if rng.random() > 0.8 else ""
            filled = filled.with_item(section.id, item.id, status=rng.choice(_STATUSES), notes=notes)
    return filled
