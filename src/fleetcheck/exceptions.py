"""Custom exception hierarchy for fleetcheck."""

from __future__ import annotations


class FleetCheckError(Exception):
    """Base exception for all fleetcheck errors."""


class FleetCheckConfigError(FleetCheckError):
    """Invalid or missing configuration."""


class FleetCheckCryptoError(FleetCheckError):
    """Encryption or decryption failure."""


class BackendError(FleetCheckError):
    """Key-value backend failure (I/O, HTTP, decryption)."""

    def __init__(
        self,
        message: str,
        *,
        key: str = "",
        operation: str = "",
    ) -> None:
        self.key = key
        self.operation = operation
        super().__init__(message)


class StorageError(FleetCheckError):
    """A persisted write could not be committed.

    Raised by the record store and the session manager when the backend
    rejects a ``set``/``remove``, or when a rewrite is refused because the
    data it would replace could not be read.  Nothing in memory has changed
    when this is raised.
    """

    def __init__(self, message: str, *, key: str = "") -> None:
        self.key = key
        super().__init__(message)


class AuthError(FleetCheckError):
    """Account registry or session failure."""


class DuplicateAccountError(AuthError):
    """Registration with an email that already exists."""

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__(f"Account already registered: {email}")


class AccountNotFoundError(AuthError):
    """Login with an email that has no account."""

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__(f"No account for email: {email}")


class CredentialDecodeError(AuthError):
    """Malformed session credential.

    Only raised by the strict decoder; the public
    :func:`fleetcheck.credential.decode` converts it to ``None``.
    """


class ChecklistError(FleetCheckError):
    """Checklist record failure."""


class ChecklistStructureError(ChecklistError):
    """Unknown section/item id, or a change to a record's fixed layout."""


class ChecklistValidationError(ChecklistError):
    """A required checklist field is missing on save."""

    def __init__(self, message: str, *, field: str = "") -> None:
        self.field = field
        super().__init__(message)
