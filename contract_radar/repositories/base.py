from __future__ import annotations

import logging
from abc import ABC
from typing import Any, Optional

import httpx

from contract_radar.core.errors import (
    HttpStatusError,
    MalformedResponseError,
    TransportError,
)

DEFAULT_HEADERS = {
    "Content-Type": "application/json",
    "Cache-Control": "no-cache",
}


class BaseApiRepository(ABC):
    """
    Read-only access to a remote JSON API.

    - one httpx.AsyncClient per call, closed by `async with`
    - transport problems -> TransportError
    - status outside 2xx -> HttpStatusError (callers may intercept first)
    - 2xx with a body that is not JSON -> MalformedResponseError
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        log: Optional[logging.Logger] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport
        self.log = log or logging.getLogger("contract_radar.api")

    def _client(self, timeout: Optional[float] = None) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=timeout if timeout is not None else self.timeout,
            headers=DEFAULT_HEADERS,
            transport=self.transport,
        )

    def _url(self, path: str, query: str = "") -> str:
        url = f"{self.base_url}{path}"
        return f"{url}?{query}" if query else url

    async def _get(self, url: str) -> httpx.Response:
        try:
            async with self._client() as client:
                r = await client.get(url)
        except httpx.TransportError as e:
            self.log.error("api_unreachable url=%s error=%s", url, e.__class__.__name__)
            raise TransportError(
                url=url,
                base_url=self.base_url,
                reason=str(e) or e.__class__.__name__,
            ) from e

        self.log.info("api_response url=%s status=%s", url, r.status_code)
        return r

    def _decode_json(self, r: httpx.Response, url: str) -> Any:
        if not r.is_success:
            self.log.error("api_http_error url=%s status=%s", url, r.status_code)
            raise HttpStatusError(
                url=url,
                status_code=r.status_code,
                reason=r.reason_phrase,
                detail=r.text,
            )
        try:
            return r.json()
        except ValueError as e:
            raise MalformedResponseError(url=url, reasons=["body is not valid JSON"]) from e
