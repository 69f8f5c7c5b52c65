from __future__ import annotations

from pathlib import Path

import aiohttp
import pytest
from aiohttp import test_utils, web

from fleetcheck.backend import (
    EncryptedBackend,
    FileBackend,
    HttpBackend,
    MemoryBackend,
    build_backend,
    build_secure_backend,
)
from fleetcheck.config import FleetCheckConfig
from fleetcheck.exceptions import BackendError

_KEY_HEX = "ab" * 32
_OTHER_KEY_HEX = "cd" * 32


# ------------------------------------------------------------------
# Memory
# ------------------------------------------------------------------


@pytest.mark.asyncio
async def test_memory_backend_round_trip() -> None:
    backend = MemoryBackend()
    assert await backend.get("session") is None
    await backend.set("session", "token")
    assert await backend.get("session") == "token"
    await backend.remove("session")
    await backend.remove("session")
    assert backend.snapshot() == {}


# ------------------------------------------------------------------
# File
# ------------------------------------------------------------------


@pytest.mark.asyncio
async def test_file_backend_round_trip(tmp_path: Path) -> None:
    backend = FileBackend(tmp_path / "data")
    assert await backend.get("checklists") is None

    await backend.set("checklists", '[{"plate": "ÁÉ1"}]')
    assert (tmp_path / "data" / "checklists.json").read_text(encoding="utf-8") == '[{"plate": "ÁÉ1"}]'
    assert await backend.get("checklists") == '[{"plate": "ÁÉ1"}]'

    await backend.set("checklists", "[]")
    assert await backend.get("checklists") == "[]"
    assert sorted(p.name for p in (tmp_path / "data").iterdir()) == ["checklists.json"]

    await backend.remove("checklists")
    await backend.remove("checklists")
    assert await backend.get("checklists") is None


@pytest.mark.asyncio
@pytest.mark.parametrize("key", ["../escape", "", "a/b", ".hidden"])
async def test_file_backend_rejects_unsafe_keys(tmp_path: Path, key: str) -> None:
    backend = FileBackend(tmp_path)
    with pytest.raises(BackendError):
        await backend.set(key, "x")


@pytest.mark.asyncio
async def test_file_backend_read_error_raises(tmp_path: Path) -> None:
    (tmp_path / "accounts.json").mkdir()
    backend = FileBackend(tmp_path)
    with pytest.raises(BackendError) as exc_info:
        await backend.get("accounts")
    assert exc_info.value.operation == "get"


# ------------------------------------------------------------------
# Encrypted
# ------------------------------------------------------------------


@pytest.mark.asyncio
async def test_encrypted_backend_seals_values() -> None:
    inner = MemoryBackend()
    backend = EncryptedBackend(inner, _KEY_HEX)

    await backend.set("accounts", '[{"email": "a@x.com"}]')

    stored = inner.snapshot()["accounts"]
    assert stored.startswith("v1:")
    assert "a@x.com" not in stored
    assert await backend.get("accounts") == '[{"email": "a@x.com"}]'


@pytest.mark.asyncio
async def test_encrypted_backend_wrong_key_fails() -> None:
    inner = MemoryBackend()
    await EncryptedBackend(inner, _KEY_HEX).set("session", "token")

    with pytest.raises(BackendError):
        await EncryptedBackend(inner, _OTHER_KEY_HEX).get("session")


@pytest.mark.asyncio
async def test_encrypted_backend_binds_value_to_key() -> None:
    inner = MemoryBackend()
    backend = EncryptedBackend(inner, _KEY_HEX)
    await backend.set("session", "token")
    await inner.set("accounts", inner.snapshot()["session"])

    with pytest.raises(BackendError):
        await backend.get("accounts")


@pytest.mark.asyncio
async def test_encrypted_backend_rejects_plaintext_and_passes_absent() -> None:
    inner = MemoryBackend({"session": "plain-token"})
    backend = EncryptedBackend(inner, _KEY_HEX)

    with pytest.raises(BackendError):
        await backend.get("session")
    assert await backend.get("accounts") is None


def test_encrypted_backend_invalid_key() -> None:
    with pytest.raises(BackendError):
        EncryptedBackend(MemoryBackend(), "not-hex")


# ------------------------------------------------------------------
# HTTP
# ------------------------------------------------------------------


def _kv_app(data: dict[str, str]) -> web.Application:
    async def get_value(request: web.Request) -> web.Response:
        key = request.match_info["key"]
        if key not in data:
            raise web.HTTPNotFound()
        return web.Response(text=data[key])

    async def put_value(request: web.Request) -> web.Response:
        data[request.match_info["key"]] = await request.text()
        return web.Response(status=204)

    async def delete_value(request: web.Request) -> web.Response:
        data.pop(request.match_info["key"], None)
        return web.Response(status=204)

    async def broken(_request: web.Request) -> web.Response:
        return web.Response(status=500, text="boom")

    app = web.Application()
    app.router.add_get("/kv/{key}", get_value)
    app.router.add_put("/kv/{key}", put_value)
    app.router.add_delete("/kv/{key}", delete_value)
    app.router.add_route("*", "/broken/{key}", broken)
    return app


@pytest.mark.asyncio
async def test_http_backend_round_trip() -> None:
    data: dict[str, str] = {}
    server = test_utils.TestServer(_kv_app(data))
    await server.start_server()
    try:
        async with aiohttp.ClientSession() as http:
            backend = HttpBackend(str(server.make_url("/kv")), http)
            assert await backend.get("checklists") is None

            await backend.set("checklists", '[{"driver": "João"}]')
            assert data == {"checklists": '[{"driver": "João"}]'}
            assert await backend.get("checklists") == '[{"driver": "João"}]'

            await backend.remove("checklists")
            await backend.remove("checklists")
            assert data == {}
    finally:
        await server.close()


@pytest.mark.asyncio
async def test_http_backend_server_errors_raise() -> None:
    server = test_utils.TestServer(_kv_app({}))
    await server.start_server()
    try:
        async with aiohttp.ClientSession() as http:
            backend = HttpBackend(str(server.make_url("/broken")), http)
            with pytest.raises(BackendError) as get_info:
                await backend.get("accounts")
            with pytest.raises(BackendError) as set_info:
                await backend.set("accounts", "[]")
            with pytest.raises(BackendError):
                await backend.remove("accounts")
    finally:
        await server.close()

    assert get_info.value.operation == "get"
    assert set_info.value.operation == "set"
    assert set_info.value.key == "accounts"


# ------------------------------------------------------------------
# Selection
# ------------------------------------------------------------------


def test_build_backend_defaults_to_memory() -> None:
    assert isinstance(build_backend(FleetCheckConfig()), MemoryBackend)


def test_build_backend_uses_data_dir(tmp_path: Path) -> None:
    backend = build_backend(FleetCheckConfig(data_dir=tmp_path))
    assert isinstance(backend, FileBackend)
    assert backend.root == tmp_path


def test_build_backend_url_requires_session() -> None:
    with pytest.raises(ValueError):
        build_backend(FleetCheckConfig(backend_url="http://kv.local"))


@pytest.mark.asyncio
async def test_build_backend_prefers_url(tmp_path: Path) -> None:
    async with aiohttp.ClientSession() as http:
        config = FleetCheckConfig(backend_url="http://kv.local", data_dir=tmp_path)
        assert isinstance(build_backend(config, http_session=http), HttpBackend)


def test_build_secure_backend() -> None:
    inner = MemoryBackend()
    assert build_secure_backend(FleetCheckConfig(), inner) is inner
    assert build_secure_backend(FleetCheckConfig(encryption_key=_KEY_HEX, encrypt_secure_keys=False), inner) is inner
    assert isinstance(build_secure_backend(FleetCheckConfig(encryption_key=_KEY_HEX), inner), EncryptedBackend)
