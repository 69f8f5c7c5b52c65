"""Persisted checklist record collection.

This is the only component allowed to write the checklist collection.
Every operation loads the whole collection, changes it in memory and writes
it back in one ``set``; there are no partial updates.  Two writers racing on
the same backend key will lose one of the updates (last write wins).
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime

from pydantic import ValidationError

from fleetcheck._redact import redact_for_log
from fleetcheck.backend.base import KeyValueBackend
from fleetcheck.config import FleetCheckConfig
from fleetcheck.exceptions import (
    BackendError,
    ChecklistStructureError,
    ChecklistValidationError,
    StorageError,
)
from fleetcheck.models._base import utcnow
from fleetcheck.models.checklist import VehicleChecklistRecord, same_structure
from fleetcheck.session import Session
from fleetcheck.visibility import sort_newest_first, visible_records

_logger = logging.getLogger(__name__)

_REQUIRED_ON_SAVE: tuple[tuple[str, str], ...] = (
    ("plate", "vehicle plate"),
    ("driver", "driver name"),
)


@dataclass
class _Collection:
    """A loaded collection plus its id -> position index."""

    records: list[VehicleChecklistRecord] = field(default_factory=list)
    index: dict[str, int] = field(default_factory=dict)

    @classmethod
    def build(cls, records: list[VehicleChecklistRecord]) -> _Collection:
        index: dict[str, int] = {}
        kept: list[VehicleChecklistRecord] = []
        for record in records:
            if record.id in index:
                # Duplicate ids can only come from hand-edited data; first one wins.
                _logger.warning("Ignoring duplicate checklist id %s", record.id)
                continue
            index[record.id] = len(kept)
            kept.append(record)
        return cls(records=kept, index=index)

    def get(self, record_id: str) -> VehicleChecklistRecord | None:
        position = self.index.get(record_id)
        return self.records[position] if position is not None else None

    def upsert(self, record: VehicleChecklistRecord) -> None:
        position = self.index.get(record.id)
        if position is None:
            self.index[record.id] = len(self.records)
            self.records.append(record)
        else:
            self.records[position] = record

    def delete(self, record_id: str) -> bool:
        if record_id not in self.index:
            return False
        self.records = [r for r in self.records if r.id != record_id]
        self.index = {r.id: i for i, r in enumerate(self.records)}
        return True


class ChecklistStore:
    """Upsert-by-id CRUD over the persisted checklist collection.

    Reads never fail: an absent key, a backend read error or corrupt JSON
    all read as an empty collection, and individual records that no longer
    validate are skipped.  Writes raise :class:`StorageError`, and nothing
    is considered committed until the backend accepts the write.
    """

    def __init__(
        self,
        backend: KeyValueBackend,
        config: FleetCheckConfig | None = None,
        *,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._backend = backend
        self._config = config or FleetCheckConfig()
        self._clock = clock

    @property
    def key(self) -> str:
        return self._config.checklists_key

    # ------------------------------------------------------------------
    # Load / commit
    # ------------------------------------------------------------------

    async def _load(self) -> _Collection:
        try:
            raw = await self._backend.get(self.key)
        except BackendError as exc:
            _logger.warning("Could not read checklists: %s", exc)
            return _Collection()
        if raw is None:
            return _Collection()
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            _logger.warning("Checklist collection is not valid JSON; treating as empty")
            return _Collection()
        if not isinstance(data, list):
            _logger.warning("Checklist collection is not a JSON array; treating as empty")
            return _Collection()

        records: list[VehicleChecklistRecord] = []
        for entry in data:
            try:
                records.append(VehicleChecklistRecord.model_validate(entry))
            except ValidationError as exc:
                _logger.warning(
                    "Skipping unreadable checklist %s: %s",
                    redact_for_log(entry.get("id") if isinstance(entry, dict) else entry, max_string=64),
                    exc.error_count(),
                )
        return _Collection.build(records)

    async def _commit(self, collection: _Collection) -> None:
        payload = json.dumps([r.to_json_dict() for r in collection.records], ensure_ascii=False)
        try:
            await self._backend.set(self.key, payload)
        except BackendError as exc:
            raise StorageError(f"Could not write checklists: {exc}", key=self.key) from exc
        _logger.debug("Committed %d checklists", len(collection.records))

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    async def list_all(self) -> list[VehicleChecklistRecord]:
        """The full collection in stored order (empty if absent or unreadable)."""
        return (await self._load()).records

    async def get_by_id(self, record_id: str) -> VehicleChecklistRecord | None:
        return (await self._load()).get(record_id)

    async def upsert(self, record: VehicleChecklistRecord) -> VehicleChecklistRecord:
        """Replace the record with the same id in place, or append it.

        The record is stored exactly as given; refresh ``updated_at`` first
        (or use :meth:`save`).

        Raises
        ------
        ChecklistStructureError
            If a stored record with this id has a different section/item layout.
        StorageError
            If the backend write fails.
        """
        collection = await self._load()
        existing = collection.get(record.id)
        if existing is not None and not same_structure(existing, record):
            raise ChecklistStructureError(f"Checklist {record.id} layout cannot change after creation")
        collection.upsert(record)
        await self._commit(collection)
        return record

    async def delete_by_id(self, record_id: str) -> None:
        """Remove the record with *record_id*; absent ids leave the collection unchanged.

        Raises
        ------
        StorageError
            If the backend write fails.
        """
        collection = await self._load()
        if not collection.delete(record_id):
            _logger.debug("Delete of unknown checklist %s", record_id)
        await self._commit(collection)

    # ------------------------------------------------------------------
    # Form flow
    # ------------------------------------------------------------------

    async def save(
        self,
        record: VehicleChecklistRecord,
        session: Session,
        *,
        now: datetime | None = None,
    ) -> VehicleChecklistRecord:
        """Validate, stamp and upsert a record edited in a form.

        Plate and driver are required.  Authorship is taken from *session*
        only if the record has none yet, and ``updated_at`` is refreshed.

        Raises
        ------
        ChecklistValidationError
            If a required header field is blank.
        """
        for field_name, label in _REQUIRED_ON_SAVE:
            if not getattr(record, field_name).strip():
                raise ChecklistValidationError(f"Please fill in the {label}", field=field_name)
        stamped = record.with_author(session.subject_id).touch(now or self._clock())
        return await self.upsert(stamped)

    async def list_visible(self, session: Session | None) -> list[VehicleChecklistRecord]:
        """Records *session* may see, newest first."""
        return visible_records(sort_newest_first(await self.list_all()), session)
