from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

import aiohttp
from loguru import logger

from dropkit.core.exceptions import TransportError

# ─── Response ────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class RawResponse:
    """Status code and decoded JSON body (``None`` when the body is empty)."""

    status: int
    data: Any


# ─── Auth ────────────────────────────────────────────────────────────


@runtime_checkable
class Auth(Protocol):
    def params(self) -> dict[str, str]: ...


class QueryAuth:
    """Sends the account credentials as ``client_id`` and ``api_key`` query parameters."""

    def __init__(self, client_id: str, api_key: str) -> None:
        self._client_id = client_id
        self._api_key = api_key

    def params(self) -> dict[str, str]:
        return {"client_id": self._client_id, "api_key": self._api_key}


# ─── Client ──────────────────────────────────────────────────────────


def _render(value: Any) -> str:
    match value:
        case bool():
            return "true" if value else "false"
        case list() | tuple():
            return ",".join(_render(v) for v in value)
        case _:
            return str(value)


class HttpClient:
    def __init__(
        self,
        base_url: str,
        auth: Auth | None = None,
        *,
        timeout: float = 30,
        default_headers: dict[str, str] | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._auth = auth
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._default_headers = {"Accept": "application/json", **(default_headers or {})}
        self._session: aiohttp.ClientSession | None = None
        self._log = logger.bind(component="http")

    def _url(self, path: str) -> str:
        return f"{self._base_url}{path}"

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
        return self._session

    def _build_params(self, params: dict[str, Any] | None) -> dict[str, str]:
        rendered = {k: _render(v) for k, v in (params or {}).items() if v is not None}
        if self._auth:
            rendered.update(self._auth.params())
        return rendered

    async def send(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
    ) -> RawResponse:
        """Execute a request and decode its JSON body.

        HTTP error statuses are returned, not raised; interpreting them is
        up to the caller. Network failures and undecodable bodies raise
        ``TransportError``.
        """
        session = await self._ensure_session()
        self._log.debug("{method} {path}", method=method, path=path)

        try:
            async with session.request(
                method,
                self._url(path),
                headers=self._default_headers,
                params=self._build_params(params),
            ) as resp:
                body = await resp.read()
                if resp.status >= 400:
                    self._log.warning(
                        "HTTP {status} from {path}: {body}",
                        status=resp.status, path=path, body=body[:500].decode(errors="replace"),
                    )
        except aiohttp.ClientError as e:
            raise TransportError(f"{method} {path} failed: {e}") from e
        except asyncio.TimeoutError as e:
            raise TransportError(f"{method} {path} timed out") from e

        if not body.strip():
            return RawResponse(status=resp.status, data=None)
        try:
            data = json.loads(body)
        except ValueError as e:
            if resp.status >= 400:
                return RawResponse(status=resp.status, data=body.decode(errors="replace"))
            raise TransportError(
                f"{method} {path} returned a non-JSON body", status=resp.status
            ) from e
        return RawResponse(status=resp.status, data=data)

    async def get(self, path: str, *, params: dict[str, Any] | None = None) -> RawResponse:
        return await self.send("GET", path, params=params)

    # ─── Lifecycle ───────────────────────────────────────────────────

    async def close(self) -> None:
        if self._session and not self._session.closed:
            self._log.debug("Closing HTTP session")
            await self._session.close()

    async def __aenter__(self) -> HttpClient:
        await self._ensure_session()
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.close()
