"""Common transport abstractions."""

from __future__ import annotations

import abc
from typing import Any, AsyncIterator, Callable, Mapping
from urllib.parse import urljoin, urlsplit, urlunsplit

from ..config import TransportOptions
from ..errors import TimeoutError
from ..logger import BoundLogger
from ..types import RequestBody, RequestDescriptor, RequestProtocol

_SCHEMES: dict[str, str] = {
    "https": "https",
    "secure": "https",
    "http": "http",
    "insecure": "http",
}

_DEFAULT_PORTS: dict[str, int] = {"http": 80, "https": 443}


def resolve_scheme(protocol: RequestProtocol | str) -> str:
    try:
        return _SCHEMES[protocol]
    except KeyError:
        raise ValueError(f"Unsupported protocol: {protocol!r}") from None


def build_request_url(
    host: str,
    port: int | None,
    path: str,
    protocol: RequestProtocol | str,
) -> str:
    """Join ``path`` onto ``scheme://host`` and apply ``port``.

    A path starting with ``/`` replaces the base path, a relative one is
    resolved against ``/``. The port is left out when it is the scheme's
    default.
    """
    if not host:
        raise ValueError("host must be a non-empty string")
    if port is not None and not 0 < port < 65536:
        raise ValueError(f"Invalid port: {port}")

    scheme = resolve_scheme(protocol)
    if ":" in host and not host.startswith("["):
        host = f"[{host}]"

    parts = urlsplit(urljoin(f"{scheme}://{host}/", path))
    if port is not None and port != _DEFAULT_PORTS[scheme]:
        bracketed = parts.hostname or ""
        if ":" in bracketed:
            bracketed = f"[{bracketed}]"
        parts = parts._replace(netloc=f"{bracketed}:{port}")
    return urlunsplit(parts)


class HttpClientResponse(abc.ABC):
    """A settled response, whatever backend produced it."""

    def __init__(self, status_code: int, headers: Mapping[str, str]) -> None:
        self._status_code = status_code
        self._headers = dict(headers)

    @property
    def status_code(self) -> int:
        return self._status_code

    @property
    def headers(self) -> dict[str, str]:
        return self._headers

    def get_status_code(self) -> int:
        return self._status_code

    def get_headers(self) -> dict[str, str]:
        return self._headers

    @abc.abstractmethod
    def get_raw_response(self) -> Any:
        """Return the backend's own response object."""

    @abc.abstractmethod
    def to_stream(self, on_stream_started: Callable[[], None]) -> AsyncIterator[bytes]:
        """Expose the body as chunks of bytes.

        ``on_stream_started`` signals that status and headers are final. It
        does not mean the body has been read.
        """

    @abc.abstractmethod
    async def to_json(self) -> Any:
        """Read the whole body and parse it as JSON."""


class HttpClient(abc.ABC):
    """Issues one HTTP request per call and returns an :class:`HttpClientResponse`.

    Implementations must raise :meth:`make_timeout_error` when a request
    exceeds its timeout so callers can recognise timeouts regardless of the
    backend in use.
    """

    TIMEOUT_ERROR_CODE = TimeoutError.code

    def __init__(
        self,
        *,
        options: TransportOptions | None = None,
        logger: BoundLogger | None = None,
    ) -> None:
        self._options = options or TransportOptions()
        self._logger = (logger or self._options.build_logger()).child(self.get_client_name())

    @property
    def options(self) -> TransportOptions:
        return self._options

    @abc.abstractmethod
    def get_client_name(self) -> str:
        """Name of the backend, e.g. ``"fetch"``."""

    @abc.abstractmethod
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
        """Issue a single request; ``timeout`` is in milliseconds."""

    async def send(self, request: RequestDescriptor) -> HttpClientResponse:
        timeout = request.timeout if request.timeout is not None else self._options.default_timeout_ms
        return await self.make_request(
            request.host,
            request.port,
            request.path,
            request.method,
            request.headers,
            request.request_data,
            request.protocol,
            timeout,
        )

    @staticmethod
    def make_timeout_error() -> TimeoutError:
        return TimeoutError("Request aborted due to timeout being reached")

    @staticmethod
    def _check_timeout(timeout: int) -> None:
        if timeout <= 0:
            raise ValueError(f"timeout must be a positive number of milliseconds, got {timeout}")


__all__ = ["HttpClient", "HttpClientResponse", "build_request_url", "resolve_scheme"]
