"""Data models for accounts and checklist records."""

from fleetcheck.models._base import FleetBaseModel, Timestamp, parse_timestamp, utcnow
from fleetcheck.models.account import Account, Role
from fleetcheck.models.catalog import SECTION_CATALOG, new_record, new_record_id, seed_sections
from fleetcheck.models.checklist import (
    HEADER_FIELDS,
    ChecklistItem,
    ChecklistSection,
    ItemStatus,
    VehicleChecklistRecord,
    coerce_status,
    same_structure,
)

__all__ = [
    "Account",
    "ChecklistItem",
    "ChecklistSection",
    "FleetBaseModel",
    "HEADER_FIELDS",
    "ItemStatus",
    "Role",
    "SECTION_CATALOG",
    "Timestamp",
    "VehicleChecklistRecord",
    "coerce_status",
    "new_record",
    "new_record_id",
    "parse_timestamp",
    "same_structure",
    "seed_sections",
    "utcnow",
]
