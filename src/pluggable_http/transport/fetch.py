"""HTTP client which hands every request to an injected ``fetch`` function."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping as MappingABC
from typing import Any, AsyncIterator, Callable, Mapping

from ..config import TransportOptions
from ..errors import ParseError
from ..logger import BoundLogger
from ..types import FetchFunction, FetchOptions, FetchResponse, RequestBody, RequestProtocol
from .base import HttpClient, HttpClientResponse, build_request_url


class FetchHttpClient(HttpClient):
    """Strategy wrapper around any fetch-style coroutine function.

    The adapter does no networking of its own. Timeouts are enforced by
    racing the fetch call against a timer, which works whether or not the
    fetch function honours cancellation.
    """

    def __init__(
        self,
        fetch_fn: FetchFunction,
        *,
        options: TransportOptions | None = None,
        logger: BoundLogger | None = None,
    ) -> None:
        if not callable(fetch_fn):
            raise TypeError("fetch_fn must be callable")
        self._fetch_fn = fetch_fn
        super().__init__(options=options, logger=logger)

    def get_client_name(self) -> str:
        return "fetch"

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
        fetch_options: FetchOptions = {
            "method": method,
            "headers": dict(headers),
            "body": request_data or None,
        }

        loop = asyncio.get_running_loop()
        timed_out: asyncio.Future[None] = loop.create_future()
        timer = loop.call_later(timeout / 1000, _expire, timed_out)
        fetch_task: asyncio.Future[FetchResponse] | None = None
        try:
            fetch_task = asyncio.ensure_future(self._fetch_fn(url, fetch_options))
            self._logger.debug("%s %s timeout=%dms", method, url, timeout)
            await asyncio.wait({fetch_task, timed_out}, return_when=asyncio.FIRST_COMPLETED)

            if not fetch_task.done():
                self._logger.warn("%s %s timed out after %dms", method, url, timeout)
                _abandon(fetch_task)
                raise self.make_timeout_error()

            res = fetch_task.result()
            response = FetchHttpClientResponse(res)
            self._logger.debug("%s %s -> %s", method, url, response.status_code)
            return response
        except asyncio.CancelledError:
            if fetch_task is not None and not fetch_task.done():
                _abandon(fetch_task)
            raise
        finally:
            timer.cancel()
            if not timed_out.done():
                timed_out.cancel()


class FetchHttpClientResponse(HttpClientResponse):
    def __init__(self, res: FetchResponse) -> None:
        super().__init__(
            _status_of(res),
            FetchHttpClientResponse._transform_headers_to_dict(res.headers),
        )
        self._res = res
        self._stream_started = False

    @property
    def stream_started(self) -> bool:
        return self._stream_started

    def get_raw_response(self) -> FetchResponse:
        return self._res

    def to_stream(self, on_stream_started: Callable[[], None]) -> AsyncIterator[bytes]:
        # Fetch responses give no signal once the body has been drained, so
        # the callback fires now. It only reports that the response metadata
        # is final; waiting for the body would mean buffering all of it.
        if not self._stream_started:
            self._stream_started = True
            on_stream_started()
        return self._res.aiter_bytes()

    async def to_json(self) -> Any:
        try:
            return await self._res.json()
        except ValueError as exc:
            raise ParseError(f"Invalid JSON response: {exc}", context=self._res) from exc

    @staticmethod
    def _transform_headers_to_dict(headers: Any) -> dict[str, str]:
        if hasattr(headers, "multi_items"):
            pairs = headers.multi_items()
        elif isinstance(headers, MappingABC):
            pairs = headers.items()
        else:
            pairs = headers

        headers_dict: dict[str, str] = {}
        for name, value in pairs:
            headers_dict[name] = value
        return headers_dict


def _status_of(res: Any) -> int:
    status = getattr(res, "status_code", None)
    if status is None:
        status = getattr(res, "status", None)
    if status is None:
        raise TypeError(f"{type(res).__name__} exposes neither status_code nor status")
    return int(status)


def _expire(timed_out: asyncio.Future[None]) -> None:
    if not timed_out.done():
        timed_out.set_result(None)


def _abandon(task: asyncio.Future[Any]) -> None:
    task.cancel()
    task.add_done_callback(_discard_result)


def _discard_result(task: asyncio.Future[Any]) -> None:
    # The outcome of an abandoned fetch is not reported anywhere
    if not task.cancelled():
        task.exception()


__all__ = ["FetchHttpClient", "FetchHttpClientResponse"]
