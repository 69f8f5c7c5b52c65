"""Session context passed explicitly to the store and the visibility filter."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict

from fleetcheck.models.account import Account, Role


class Session(BaseModel):
    """The active account for the current process.

    Parameters
    ----------
    subject_id : str
        Id of the account the credential was minted for.
    email : str
        Account email.
    name : str
        Account display name.
    role : Role
        The only authorization signal used for record visibility.
    issued_at : int
        Epoch milliseconds when the credential was minted.
    token : str
        The session credential this context was decoded from.  It is not
        signed: anyone holding a well-formed credential is trusted.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_default=True,
    )

    subject_id: str
    email: str
    name: str = ""
    role: Role = Role.USER
    issued_at: int = 0
    token: str = ""

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @property
    def issued_at_datetime(self) -> datetime:
        return datetime.fromtimestamp(self.issued_at / 1000, tz=UTC)

    def account(self) -> Account:
        """Account-shaped view of the session.

        ``created_at`` is not carried by the credential; the issue time is
        used in its place.
        """
        return Account(
            id=self.subject_id,
            email=self.email,
            name=self.name,
            role=self.role,
            created_at=self.issued_at_datetime,
        )
