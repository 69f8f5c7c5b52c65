"""Account registry and current-session management."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from datetime import datetime

from pydantic import ValidationError

from fleetcheck import credential
from fleetcheck.backend.base import KeyValueBackend
from fleetcheck.config import FleetCheckConfig
from fleetcheck.exceptions import (
    AccountNotFoundError,
    BackendError,
    DuplicateAccountError,
    StorageError,
)
from fleetcheck.models._base import utcnow
from fleetcheck.models.account import Account, Role
from fleetcheck.session import Session

_logger = logging.getLogger(__name__)


class SessionManager:
    """Owns the account registry and the current session.

    Usage::

        manager = SessionManager(backend, config)
        await manager.bootstrap()
        account = await manager.login("admin@example.com", "anything")
        session = manager.current_session

    Passwords are accepted by :meth:`register` and :meth:`login` but are
    never stored or checked.  Credentials are self-issued and unsigned.
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
        self._session: Session | None = None

    # ------------------------------------------------------------------
    # Current session
    # ------------------------------------------------------------------

    @property
    def current_session(self) -> Session | None:
        return self._session

    @property
    def current_account(self) -> Account | None:
        session = self._session
        return session.account() if session is not None else None

    @property
    def is_authenticated(self) -> bool:
        return self._session is not None

    # ------------------------------------------------------------------
    # Registry I/O
    # ------------------------------------------------------------------

    async def _read_registry(self, *, strict: bool = False) -> list[Account] | None:
        """Load the registry; ``None`` when the key is absent.

        With ``strict=False`` an unreadable registry also reads as ``None``
        and malformed entries are skipped.  With ``strict=True`` either case
        raises :class:`StorageError`, so a caller about to rewrite the
        registry never drops accounts it could not read.
        """
        key = self._config.accounts_key
        try:
            raw = await self._backend.get(key)
        except BackendError as exc:
            if strict:
                raise StorageError(f"Could not read account registry: {exc}", key=key) from exc
            _logger.warning("Could not read account registry: %s", exc)
            return None
        if raw is None:
            return None
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            data = None
        if not isinstance(data, list):
            if strict:
                raise StorageError("Account registry is not a JSON array", key=key)
            _logger.warning("Account registry is not a JSON array; treating as empty")
            return None

        accounts: list[Account] = []
        for entry in data:
            try:
                accounts.append(Account.model_validate(entry))
            except ValidationError as exc:
                if strict:
                    raise StorageError("Account registry holds a malformed entry", key=key) from exc
                _logger.warning("Skipping malformed account entry in registry")
        return accounts

    async def _write_registry(self, accounts: list[Account]) -> None:
        key = self._config.accounts_key
        payload = json.dumps([a.to_json_dict() for a in accounts], ensure_ascii=False)
        try:
            await self._backend.set(key, payload)
        except BackendError as exc:
            raise StorageError(f"Could not write account registry: {exc}", key=key) from exc

    async def _registry_is_empty(self) -> bool:
        try:
            raw = await self._backend.get(self._config.accounts_key)
        except BackendError as exc:
            _logger.warning("Could not read account registry: %s", exc)
            return False
        if raw is None:
            return True
        try:
            return json.loads(raw) == []
        except json.JSONDecodeError:
            return False

    async def accounts(self) -> list[Account]:
        """Every registered account, in registration order."""
        return await self._read_registry() or []

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def bootstrap(self) -> Session | None:
        """Seed the admin account if needed and restore the persisted session.

        The seed write happens only when the registry is absent or an empty
        array, so calling this repeatedly is harmless.  An unreadable
        registry is left alone.  A seed write failure is logged and does not
        stop the session from being restored.
        """
        if await self._registry_is_empty():
            admin = Account(
                id=self._config.admin_id,
                email=self._config.admin_email,
                name=self._config.admin_name,
                role=Role.ADMIN,
                created_at=self._clock(),
            )
            try:
                await self._write_registry([admin])
            except StorageError as exc:
                _logger.error("Could not seed admin account: %s", exc)
            else:
                _logger.info("Seeded admin account %s", admin.email)

        self._session = await self._load_session()
        return self._session

    async def _load_session(self) -> Session | None:
        key = self._config.session_key
        try:
            token = await self._backend.get(key)
        except BackendError as exc:
            _logger.warning("Could not read persisted session: %s", exc)
            return None
        if token is None:
            return None
        session = credential.decode_session(token)
        if session is None:
            _logger.warning("Persisted session credential is malformed; ignoring it")
        return session

    async def _start_session(self, account: Account) -> Session:
        issued_at = int(self._clock().timestamp() * 1000)
        token = credential.mint(account, issued_at=issued_at)
        key = self._config.session_key
        try:
            await self._backend.set(key, token)
        except BackendError as exc:
            raise StorageError(f"Could not persist session: {exc}", key=key) from exc
        self._session = Session(
            subject_id=account.id,
            email=account.email,
            name=account.name,
            role=account.role,
            issued_at=issued_at,
            token=token,
        )
        return self._session

    def _new_account_id(self, existing: list[Account]) -> str:
        taken = {a.id for a in existing}
        base = str(int(self._clock().timestamp() * 1000))
        candidate = base
        suffix = 1
        while candidate in taken:
            candidate = f"{base}-{suffix}"
            suffix += 1
        return candidate

    async def register(self, email: str, password: str, name: str) -> Account:
        """Create a ``user`` account and sign it in.

        Raises
        ------
        DuplicateAccountError
            If *email* is already registered (exact match).
        StorageError
            If the registry could not be read in full, or the registry or
            the session could not be written.  Nothing is written when the
            registry is unreadable.
        """
        del password  # accepted, never stored or verified
        accounts = await self._read_registry(strict=True) or []
        if any(a.email == email for a in accounts):
            raise DuplicateAccountError(email)

        account = Account(
            id=self._new_account_id(accounts),
            email=email,
            name=name,
            role=Role.USER,
            created_at=self._clock(),
        )
        await self._write_registry([*accounts, account])
        await self._start_session(account)
        _logger.info("Registered account %s", account.email)
        return account

    async def login(self, email: str, password: str) -> Account:
        """Sign in as the account registered under *email*.

        Raises
        ------
        AccountNotFoundError
            If no account has *email*.  No credential is persisted.
        StorageError
            If the session could not be written.
        """
        del password  # accepted, never verified
        accounts = await self._read_registry() or []
        account = next((a for a in accounts if a.email == email), None)
        if account is None:
            raise AccountNotFoundError(email)
        await self._start_session(account)
        _logger.info("Logged in as %s", account.email)
        return account

    async def logout(self) -> None:
        """Delete the persisted credential and clear the current session.

        Raises
        ------
        StorageError
            If the backend refused the removal; the session stays active.
        """
        key = self._config.session_key
        try:
            await self._backend.remove(key)
        except BackendError as exc:
            raise StorageError(f"Could not remove session: {exc}", key=key) from exc
        if self._session is not None:
            _logger.info("Logged out %s", self._session.email)
        self._session = None
