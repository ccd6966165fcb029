from __future__ import annotations

import logging
from typing import Any

import httpx

from .errors import ApiError, NetworkError

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "pasty-client/0.1.0"


class Transport:
    def __init__(self, *, user_agent: str | None = None, http_client: httpx.AsyncClient | None = None):
        if http_client is None:
            http_client = httpx.AsyncClient(headers={"User-Agent": user_agent or DEFAULT_USER_AGENT})
        self._client = http_client

    async def aclose(self) -> None:
        await self._client.aclose()

    def build_request(
            self,
            method: str,
            url: httpx.URL,
            *,
            json_body: Any | None = None,
            token: str | None = None,
    ) -> httpx.Request:
        headers = {}
        if token is not None:
            headers["Authorization"] = f"Bearer {token}"
        return self._client.build_request(method, url, json=json_body, headers=headers)

    async def send(self, request: httpx.Request) -> httpx.Response:
        logger.debug("%s %s", request.method, request.url)
        try:
            r = await self._client.send(request)
        except httpx.RequestError as e:
            raise NetworkError(f"{request.method} {request.url.path} failed: {e}") from e
        logger.debug("%s %s -> %s", request.method, request.url, r.status_code)

        if not r.is_success:
            msg = f"{request.method} {request.url.path} failed with {r.status_code}"
            details = r.text[:1000] if r.text else None
            raise ApiError(r.status_code, msg, details)
        return r
