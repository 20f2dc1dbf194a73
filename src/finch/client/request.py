"""Outbound HTTP client over httpx.

Each verb performs exactly one network call: no retries and no default
timeout. A transport passed to the constructor is used as-is, which is
how tests substitute ``httpx.MockTransport``::

    client = Client(base_url="https://api.example.com")
    response = client.get("/accounts", Options(query_params=[QueryParam("page", 2)]))

A status code of 400 or above raises ``RequestError`` with the response
attached.
"""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any, Self

import httpx

from finch.client.options import Options
from finch.errors import RequestError

logger = logging.getLogger("finch.client")

_EMPTY = Options()


def _build_request(
    http: httpx.Client | httpx.AsyncClient,
    method: str,
    url: str,
    options: Options | None,
) -> httpx.Request:
    options = options or _EMPTY
    headers = options.header_pairs()
    content_type = options.default_content_type()
    if content_type:
        headers.append(("Content-Type", content_type))
    params = options.query_pairs()
    return http.build_request(
        method.upper(),
        url,
        headers=headers,
        params=params or None,
        content=options.content(),
    )


def _check(response: httpx.Response) -> httpx.Response:
    request = response.request
    logger.debug("%s %s -> %d", request.method, request.url, response.status_code)
    if response.status_code >= 400:
        raise RequestError(response.status_code, response)
    return response


class Client:
    """Blocking client. Use as a context manager or call ``close()``."""

    __slots__ = ("_http",)

    def __init__(
        self,
        *,
        transport: httpx.BaseTransport | None = None,
        base_url: str = "",
        timeout: float | None = None,
        **kwargs: Any,
    ) -> None:
        self._http = httpx.Client(transport=transport, base_url=base_url, timeout=timeout, **kwargs)

    def request(self, method: str, url: str, options: Options | None = None) -> httpx.Response:
        """Send one request; transport errors propagate unchanged."""
        response = self._http.send(_build_request(self._http, method, url, options))
        return _check(response)

    def get(self, url: str, options: Options | None = None) -> httpx.Response:
        return self.request("GET", url, options)

    def post(self, url: str, options: Options | None = None) -> httpx.Response:
        return self.request("POST", url, options)

    def put(self, url: str, options: Options | None = None) -> httpx.Response:
        return self.request("PUT", url, options)

    def patch(self, url: str, options: Options | None = None) -> httpx.Response:
        return self.request("PATCH", url, options)

    def delete(self, url: str, options: Options | None = None) -> httpx.Response:
        return self.request("DELETE", url, options)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


class AsyncClient:
    """Async twin of ``Client`` over ``httpx.AsyncClient``.

    Pointing it at a finch server in-process::

        transport = httpx.ASGITransport(app=server)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/accounts/ann")
    """

    __slots__ = ("_http",)

    def __init__(
        self,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        base_url: str = "",
        timeout: float | None = None,
        **kwargs: Any,
    ) -> None:
        self._http = httpx.AsyncClient(
            transport=transport, base_url=base_url, timeout=timeout, **kwargs
        )

    async def request(
        self, method: str, url: str, options: Options | None = None
    ) -> httpx.Response:
        """Send one request; transport errors propagate unchanged."""
        response = await self._http.send(_build_request(self._http, method, url, options))
        return _check(response)

    async def get(self, url: str, options: Options | None = None) -> httpx.Response:
        return await self.request("GET", url, options)

    async def post(self, url: str, options: Options | None = None) -> httpx.Response:
        return await self.request("POST", url, options)

    async def put(self, url: str, options: Options | None = None) -> httpx.Response:
        return await self.request("PUT", url, options)

    async def patch(self, url: str, options: Options | None = None) -> httpx.Response:
        return await self.request("PATCH", url, options)

    async def delete(self, url: str, options: Options | None = None) -> httpx.Response:
        return await self.request("DELETE", url, options)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()
