from __future__ import annotations

from typing import Any, Callable, TypeVar

import httpx
from pydantic import ValidationError

from .config_types import ClientConfig
from .errors import DecodeError, UrlParseError
from .models import (
    ApplicationInformation,
    CreatedPaste,
    CreatePasteRequest,
    Metadata,
    Paste,
)
from .transport import Transport

API_PREFIX = "/api/v2"

# ':' stays allowed, httpx reports IPv6 hosts without brackets
_FORBIDDEN_HOST_CHARS = frozenset('#%/<>?@[\\]^|"{}`')

T = TypeVar("T")


def parse_host(host: str | httpx.URL) -> httpx.URL:
    """Parse a pasty base URL; only absolute http(s) URLs are accepted."""
    try:
        url = httpx.URL(host)
    except (httpx.InvalidURL, TypeError) as e:
        raise UrlParseError(str(e)) from e
    if not url.scheme:
        raise UrlParseError(f"relative URL without a base: {str(host)!r}")
    if url.scheme not in ("http", "https"):
        raise UrlParseError(f"unsupported scheme {url.scheme!r}")
    if not url.host:
        raise UrlParseError(f"empty host: {str(host)!r}")
    if any(ch.isspace() or ch in _FORBIDDEN_HOST_CHARS for ch in url.host):
        raise UrlParseError(f"invalid domain character in {url.host!r}")
    if url.port is not None and not 0 <= url.port <= 65535:
        raise UrlParseError(f"invalid port number {url.port}")
    return url


class UnauthenticatedClient:
    """API client for the anonymous pasty endpoints.

    See https://github.com/lus/pasty/blob/master/API.md#api
    """

    def __init__(self, host: str | httpx.URL, *, transport: Transport | None = None):
        self._host = parse_host(host)
        self._t = transport or Transport()

    @property
    def host(self) -> httpx.URL:
        return self._host

    def _url(self, path: str) -> httpx.URL:
        try:
            return self._host.join(path)
        except httpx.InvalidURL as e:
            raise UrlParseError(str(e)) from e

    async def aclose(self) -> None:
        await self._t.aclose()

    async def __aenter__(self) -> UnauthenticatedClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def application_information(self) -> ApplicationInformation:
        """Binds to `GET /api/v2/info`."""
        r = self._t.build_request("GET", self._url(f"{API_PREFIX}/info"))
        return await _request_body(self._t, r, ApplicationInformation.model_validate)

    async def paste(self, paste_id: str) -> Paste:
        """Binds to `GET /api/v2/pastes/{paste_id}`."""
        r = self._t.build_request("GET", self._url(f"{API_PREFIX}/pastes/{paste_id}"))
        return await _request_body(self._t, r, Paste.model_validate)

    async def create_paste(self, content: str, metadata: Metadata | None = None) -> CreatedPaste:
        """Binds to `POST /api/v2/pastes`.

        The returned modification token is only ever handed out here; the
        caller has to keep it to update or delete the paste later.
        """
        body = CreatePasteRequest(content=content, metadata=metadata)
        r = self._t.build_request("POST", self._url(f"{API_PREFIX}/pastes"), json_body=body.to_dict())
        return await _request_body(self._t, r, CreatedPaste.from_flat)

    def authenticate(self, token: str) -> AuthenticatedClient:
        """Wrap this client with a paste modification or admin token.

        The token is not checked here; a bad one shows up as an ApiError on
        the first authenticated call.
        """
        return AuthenticatedClient(self, token)


class AuthenticatedClient:
    """API client for the endpoints guarded by a bearer token.

    Created through :meth:`UnauthenticatedClient.authenticate`.
    """

    def __init__(self, client: UnauthenticatedClient, token: str):
        self._client = client
        self._token = token

    @property
    def inner(self) -> UnauthenticatedClient:
        return self._client

    @property
    def token(self) -> str:
        return self._token

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> AuthenticatedClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def update_paste(self, paste_id: str, content: str, metadata: Metadata | None = None) -> None:
        """Binds to `PATCH /api/v2/pastes/{paste_id}`."""
        body = CreatePasteRequest(content=content, metadata=metadata)
        c = self._client
        r = c._t.build_request(
            "PATCH",
            c._url(f"{API_PREFIX}/pastes/{paste_id}"),
            json_body=body.to_dict(),
            token=self._token,
        )
        await _request(c._t, r)

    async def delete_paste(self, paste_id: str) -> None:
        """Binds to `DELETE /api/v2/pastes/{paste_id}`."""
        c = self._client
        r = c._t.build_request("DELETE", c._url(f"{API_PREFIX}/pastes/{paste_id}"), token=self._token)
        await _request(c._t, r)


def connect(
        cfg: ClientConfig,
        *,
        transport: Transport | None = None,
) -> UnauthenticatedClient | AuthenticatedClient:
    parse_host(cfg.host)
    if transport is None:
        user_agent = f"pasty-client/{cfg.client_version}" if cfg.client_version else None
        transport = Transport(user_agent=user_agent)
    client = UnauthenticatedClient(cfg.host, transport=transport)
    if cfg.token:
        return client.authenticate(cfg.token)
    return client


async def _request_body(t: Transport, request: httpx.Request, decode: Callable[[Any], T]) -> T:
    r = await t.send(request)
    try:
        data = r.json()
    except ValueError as e:
        raise DecodeError(f"{request.method} {request.url.path}: invalid JSON body: {e}") from e
    try:
        return decode(data)
    except ValidationError as e:
        raise DecodeError(f"{request.method} {request.url.path}: unexpected response: {e}") from e


async def _request(t: Transport, request: httpx.Request) -> None:
    await t.send(request)
