"""Base model and timestamp type for persisted fleetcheck data.

Every persisted model inherits from :class:`FleetBaseModel` which provides:

* ``alias_generator=to_camel`` so the stored JSON keeps camelCase keys
  (``userId``, ``sectionNotes``, ``createdAt``) while Python code uses
  snake_case.
* Frozen instances.  Edits go through ``with_*`` helpers that return new
  objects, so aggregation and filtering can never mutate their input.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict
from pydantic.alias_generators import to_camel


def utcnow() -> datetime:
    return datetime.now(UTC)


def parse_timestamp(value: Any) -> Any:
    """Coerce ISO-8601 strings to timezone-aware datetimes.

    Naive values are taken to be UTC.  Anything else is passed through for
    pydantic to validate.
    """
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        value = datetime.fromisoformat(text)
    if isinstance(value, datetime) and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


Timestamp = Annotated[datetime, BeforeValidator(parse_timestamp)]
"""Timezone-aware instant, persisted as ISO-8601."""


class FleetBaseModel(BaseModel):
    """Base for persisted models (camelCase on the wire, frozen in memory)."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    def to_json_dict(self) -> dict[str, Any]:
        """Dump to the persisted JSON shape."""
        return self.model_dump(mode="json", by_alias=True)
