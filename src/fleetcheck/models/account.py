"""Account model."""

from __future__ import annotations

from enum import StrEnum

from pydantic import Field, field_validator

from fleetcheck.models._base import FleetBaseModel, Timestamp, utcnow


class Role(StrEnum):
    ADMIN = "admin"
    USER = "user"


class Account(FleetBaseModel):
    """A registered account.

    Accounts are unique by ``email`` (exact, case-sensitive match) and are
    never edited after registration.
    """

    id: str
    email: str
    name: str = ""
    role: Role = Role.USER
    created_at: Timestamp = Field(default_factory=utcnow)

    @field_validator("id", "email")
    @classmethod
    def _non_empty(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must be non-empty")
        return value

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN
