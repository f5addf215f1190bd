"""HTTP transports built on top of httpx."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, AsyncIterator, Callable, Iterator, Mapping

import httpx

from ..config import TransportOptions
from ..errors import ParseError, TransportError
from ..logger import BoundLogger
from ..types import FetchOptions, RequestBody, RequestProtocol
from .base import HttpClient, HttpClientResponse, build_request_url


@contextmanager
def _mapped_errors(url: str) -> Iterator[None]:
    """Turn httpx failures into the transport's own errors."""
    try:
        yield
    except httpx.TimeoutException as exc:
        raise HttpClient.make_timeout_error() from exc
    except httpx.RequestError as exc:
        raise TransportError(f"Request to {url} failed: {exc}", context=exc) from exc


class HttpxHttpClient(HttpClient):
    """Client that talks to the network through an ``httpx.AsyncClient``.

    The timeout is handed to httpx, which applies it to each phase of the
    exchange (connect, write, read, pool acquisition).
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        options: TransportOptions | None = None,
        logger: BoundLogger | None = None,
    ) -> None:
        super().__init__(options=options, logger=logger)
        self._client = client or httpx.AsyncClient()
        self._owns_client = client is None

    async def __aenter__(self) -> "HttpxHttpClient":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()

    def get_client_name(self) -> str:
        return "httpx"

    async def make_request(
        self,
        host: str,
        port: int | None,
        path: str,
        method: str,
        headers: Mapping[str, str],
        request_data: RequestBody | None,
        protocol: RequestProtocol | str,
        timeout: int,
    ) -> HttpClientResponse:
        self._check_timeout(timeout)
        url = build_request_url(host, port, path, protocol)
        request = self._client.build_request(
            method,
            url,
            headers=dict(headers),
            content=request_data or None,
            timeout=httpx.Timeout(timeout / 1000),
        )

        try:
            self._logger.debug("%s %s timeout=%dms", method, url, timeout)
            response = await self._client.send(request, stream=True)
        except httpx.TimeoutException as exc:
            self._logger.warn("%s %s timed out after %dms", method, url, timeout)
            raise self.make_timeout_error() from exc
        except httpx.RequestError as exc:
            raise TransportError(f"Cannot connect to {url}: {exc}", context=exc) from exc

        self._logger.debug("%s %s -> %s", method, url, response.status_code)
        return HttpxHttpClientResponse(response)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()


class HttpxHttpClientResponse(HttpClientResponse):
    def __init__(self, res: httpx.Response) -> None:
        super().__init__(res.status_code, dict(res.headers.multi_items()))
        self._res = res
        self._stream_started = False

    @property
    def stream_started(self) -> bool:
        return self._stream_started

    def get_raw_response(self) -> httpx.Response:
        return self._res

    def to_stream(self, on_stream_started: Callable[[], None]) -> AsyncIterator[bytes]:
        """Stream the body, calling ``on_stream_started`` once it is drained.

        httpx reports when the body ends, so the callback fires after the last
        chunk, or when the stream is closed early or fails. A stream that is
        never iterated never fires it.
        """
        return self._iter_body(on_stream_started)

    async def _iter_body(self, on_stream_started: Callable[[], None]) -> AsyncIterator[bytes]:
        try:
            with _mapped_errors(str(self._res.url)):
                async for chunk in self._res.aiter_bytes():
                    yield chunk
        finally:
            await self._res.aclose()
            if not self._stream_started:
                self._stream_started = True
                on_stream_started()

    async def to_json(self) -> Any:
        with _mapped_errors(str(self._res.url)):
            await self._res.aread()
        try:
            return self._res.json()
        except ValueError as exc:
            raise ParseError(f"Invalid JSON response: {exc}", context=self._res) from exc

    async def aclose(self) -> None:
        await self._res.aclose()


class HttpxFetch:
    """A fetch function for :class:`~pluggable_http.transport.fetch.FetchHttpClient`.

    Usage::

        async with HttpxFetch() as fetch:
            client = FetchHttpClient(fetch)
            response = await client.make_request(...)

    An owned ``httpx.AsyncClient`` is created without a timeout of its own;
    the fetch client's timer decides when a request has taken too long.
    """

    def __init__(self, client: httpx.AsyncClient | None = None) -> None:
        self._client = client or httpx.AsyncClient(timeout=None)
        self._owns_client = client is None

    async def __aenter__(self) -> "HttpxFetch":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()

    async def __call__(self, url: str, options: FetchOptions) -> "HttpxFetchResponse":
        request = self._client.build_request(
            options["method"],
            url,
            headers=options["headers"],
            content=options["body"],
        )
        try:
            response = await self._client.send(request, stream=True)
        except httpx.RequestError as exc:
            raise TransportError(f"Cannot connect to {url}: {exc}", context=exc) from exc
        return HttpxFetchResponse(response)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()


class HttpxFetchResponse:
    """Fetch-shaped view of a streamed ``httpx.Response``."""

    def __init__(self, response: httpx.Response) -> None:
        self.response = response
        self.status_code = response.status_code
        self.headers = response.headers.multi_items()

    def aiter_bytes(self) -> AsyncIterator[bytes]:
        return self._iter_body()

    async def _iter_body(self) -> AsyncIterator[bytes]:
        with _mapped_errors(str(self.response.url)):
            async for chunk in self.response.aiter_bytes():
                yield chunk

    async def json(self) -> Any:
        with _mapped_errors(str(self.response.url)):
            await self.response.aread()
        return self.response.json()


__all__ = ["HttpxFetch", "HttpxFetchResponse", "HttpxHttpClient", "HttpxHttpClientResponse"]
