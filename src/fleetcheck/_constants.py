"""Internal constants shared across the library."""

ACCOUNTS_KEY = "accounts"
SESSION_KEY = "session"
CHECKLISTS_KEY = "checklists"

# Seed admin created on first bootstrap.
DEFAULT_ADMIN_ID = "admin-001"
DEFAULT_ADMIN_EMAIL = "admin@example.com"
DEFAULT_ADMIN_NAME = "Administrator"

# Persisted status spelling used by older data ("ruim" = bad).
LEGACY_STATUS_ALIASES: dict[str, str] = {"ruim": "bad"}
