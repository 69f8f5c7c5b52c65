"""Library configuration for fleetcheck."""

from __future__ import annotations

import dataclasses
import os
from pathlib import Path
from typing import Any

from fleetcheck._constants import (
    ACCOUNTS_KEY,
    CHECKLISTS_KEY,
    DEFAULT_ADMIN_EMAIL,
    DEFAULT_ADMIN_ID,
    DEFAULT_ADMIN_NAME,
    SESSION_KEY,
)
from fleetcheck.exceptions import FleetCheckConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class FleetCheckConfig:
    """Store and session configuration.

    Parameters
    ----------
    accounts_key : str
        Backend key holding the JSON array of accounts.
    session_key : str
        Backend key holding the current session credential.
    checklists_key : str
        Backend key holding the JSON array of checklist records.
    admin_email : str
        Email of the seed admin account created on first bootstrap.
    admin_name : str
        Display name of the seed admin account.
    admin_id : str
        Account id of the seed admin account.
    data_dir : Path or None
        Directory for the file backend.  ``None`` keeps data in memory.
    backend_url : str or None
        Base URL of a remote key-value service.  Takes precedence over
        ``data_dir``.
    encryption_key : str or None
        64-character hex key (32 bytes) used to encrypt the account
        registry and the session at rest.
    encrypt_secure_keys : bool
        Encrypt the accounts and session keys when ``encryption_key`` is
        set.  The checklist collection is always stored in the clear.
    """

    accounts_key: str = ACCOUNTS_KEY
    session_key: str = SESSION_KEY
    checklists_key: str = CHECKLISTS_KEY
    admin_email: str = DEFAULT_ADMIN_EMAIL
    admin_name: str = DEFAULT_ADMIN_NAME
    admin_id: str = DEFAULT_ADMIN_ID
    data_dir: Path | None = None
    backend_url: str | None = None
    encryption_key: str | None = None
    encrypt_secure_keys: bool = True

    def __post_init__(self) -> None:
        keys = (self.accounts_key, self.session_key, self.checklists_key)
        if any(not key.strip() for key in keys):
            raise FleetCheckConfigError("storage keys must be non-empty")
        if len(set(keys)) != len(keys):
            raise FleetCheckConfigError(f"storage keys must be distinct, got {keys}")
        if not self.admin_email.strip():
            raise FleetCheckConfigError("admin_email must be non-empty")
        if self.encryption_key is not None:
            text = self.encryption_key.strip()
            try:
                raw = bytes.fromhex(text)
            except ValueError as exc:
                raise FleetCheckConfigError("encryption_key must be hex-encoded") from exc
            if len(raw) != 32:
                raise FleetCheckConfigError(f"encryption_key must be 32 bytes (got {len(raw)})")

    @property
    def encryption_enabled(self) -> bool:
        return self.encryption_key is not None and self.encrypt_secure_keys

    @classmethod
    def from_env(cls, **overrides: Any) -> FleetCheckConfig:
        """Create configuration from ``FLEETCHECK_*`` environment variables.

        Explicit keyword arguments override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        FleetCheckConfig
            Populated configuration.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "FLEETCHECK_ACCOUNTS_KEY": "accounts_key",
            "FLEETCHECK_SESSION_KEY": "session_key",
            "FLEETCHECK_CHECKLISTS_KEY": "checklists_key",
            "FLEETCHECK_ADMIN_EMAIL": "admin_email",
            "FLEETCHECK_ADMIN_NAME": "admin_name",
            "FLEETCHECK_ADMIN_ID": "admin_id",
            "FLEETCHECK_BACKEND_URL": "backend_url",
            "FLEETCHECK_ENCRYPTION_KEY": "encryption_key",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        data_dir_env = env.get("FLEETCHECK_DATA_DIR")
        if data_dir_env is not None and "data_dir" not in overrides:
            config_kwargs["data_dir"] = Path(data_dir_env).expanduser()

        if "encrypt_secure_keys" not in overrides:
            config_kwargs["encrypt_secure_keys"] = _env_bool(
                env.get("FLEETCHECK_ENCRYPT_SECURE_KEYS"),
                True,
            )

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
