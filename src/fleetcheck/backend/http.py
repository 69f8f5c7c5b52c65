"""Remote key-value service over HTTP."""

from __future__ import annotations

import logging
from urllib.parse import quote

import aiohttp

from fleetcheck._redact import describe_value
from fleetcheck.exceptions import BackendError

_logger = logging.getLogger(__name__)

USER_AGENT = "fleetcheck"


class HttpBackend:
    """Key-value backend speaking plain HTTP.

    ``GET {base_url}/{key}`` returns the value as the response body
    (``404`` means absent), ``PUT`` stores the request body and ``DELETE``
    removes the key (``404`` is accepted).  The caller owns the
    :class:`aiohttp.ClientSession` and its timeout.
    """

    def __init__(self, base_url: str, http_session: aiohttp.ClientSession) -> None:
        self._base_url = base_url.rstrip("/")
        self._http = http_session

    def _url(self, key: str) -> str:
        return f"{self._base_url}/{quote(key, safe='')}"

    @staticmethod
    def _headers() -> dict[str, str]:
        return {
            "accept": "text/plain",
            "content-type": "text/plain; charset=utf-8",
            "user-agent": USER_AGENT,
        }

    async def get(self, key: str) -> str | None:
        url = self._url(key)
        _logger.debug("GET %s", url)
        try:
            async with self._http.get(url, headers=self._headers()) as resp:
                if resp.status == 404:
                    return None
                text = await resp.text(encoding="utf-8")
                if resp.status != 200:
                    raise BackendError(
                        f"HTTP {resp.status} reading {key}: {text[:200]}",
                        key=key,
                        operation="get",
                    )
        except BackendError:
            raise
        except aiohttp.ClientError as exc:
            raise BackendError(f"Read of {key} failed: {exc}", key=key, operation="get") from exc

        _logger.debug("GET %s -> %s", key, describe_value(key, text))
        return text

    async def set(self, key: str, value: str) -> None:
        url = self._url(key)
        _logger.debug("PUT %s <- %s", url, describe_value(key, value))
        try:
            async with self._http.put(url, data=value.encode("utf-8"), headers=self._headers()) as resp:
                if resp.status not in (200, 201, 204):
                    text = await resp.text()
                    raise BackendError(
                        f"HTTP {resp.status} writing {key}: {text[:200]}",
                        key=key,
                        operation="set",
                    )
        except BackendError:
            raise
        except aiohttp.ClientError as exc:
            raise BackendError(f"Write of {key} failed: {exc}", key=key, operation="set") from exc

    async def remove(self, key: str) -> None:
        url = self._url(key)
        _logger.debug("DELETE %s", url)
        try:
            async with self._http.delete(url, headers=self._headers()) as resp:
                if resp.status not in (200, 204, 404):
                    text = await resp.text()
                    raise BackendError(
                        f"HTTP {resp.status} removing {key}: {text[:200]}",
                        key=key,
                        operation="remove",
                    )
        except BackendError:
            raise
        except aiohttp.ClientError as exc:
            raise BackendError(f"Remove of {key} failed: {exc}", key=key, operation="remove") from exc
