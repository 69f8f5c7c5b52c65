"""fleetcheck - Vehicle inspection checklist store with role-scoped sessions."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("fleetcheck")
except PackageNotFoundError:
    __version__ = "0+local"
from fleetcheck.aggregation import (
    RecordSummary,
    SectionSummary,
    StatusGlyph,
    record_not_ok_count,
    record_summary,
    section_summary,
    severity,
    status_glyph,
    worst_status,
)
from fleetcheck.auth import SessionManager
from fleetcheck.backend import (
    EncryptedBackend,
    FileBackend,
    HttpBackend,
    KeyValueBackend,
    MemoryBackend,
    build_backend,
    build_secure_backend,
)
from fleetcheck.config import FleetCheckConfig
from fleetcheck.credential import decode, decode_session, mint
from fleetcheck.exceptions import (
    AccountNotFoundError,
    AuthError,
    BackendError,
    ChecklistError,
    ChecklistStructureError,
    ChecklistValidationError,
    CredentialDecodeError,
    DuplicateAccountError,
    FleetCheckConfigError,
    FleetCheckCryptoError,
    FleetCheckError,
    StorageError,
)
from fleetcheck.models import (
    Account,
    ChecklistItem,
    ChecklistSection,
    ItemStatus,
    Role,
    VehicleChecklistRecord,
    new_record,
)
from fleetcheck.session import Session
from fleetcheck.store import ChecklistStore
from fleetcheck.visibility import sort_newest_first, visible_records

__all__ = [
    "__version__",
    "Account",
    "AccountNotFoundError",
    "AuthError",
    "BackendError",
    "ChecklistError",
    "ChecklistItem",
    "ChecklistSection",
    "ChecklistStore",
    "ChecklistStructureError",
    "ChecklistValidationError",
    "CredentialDecodeError",
    "DuplicateAccountError",
    "EncryptedBackend",
    "FileBackend",
    "FleetCheckConfig",
    "FleetCheckConfigError",
    "FleetCheckCryptoError",
    "FleetCheckError",
    "HttpBackend",
    "ItemStatus",
    "KeyValueBackend",
    "MemoryBackend",
    "RecordSummary",
    "Role",
    "SectionSummary",
    "Session",
    "SessionManager",
    "StatusGlyph",
    "StorageError",
    "VehicleChecklistRecord",
    "build_backend",
    "build_secure_backend",
    "decode",
    "decode_session",
    "mint",
    "new_record",
    "record_not_ok_count",
    "record_summary",
    "section_summary",
    "severity",
    "sort_newest_first",
    "status_glyph",
    "visible_records",
    "worst_status",
]
