"""Shared typing helpers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import (
    Any,
    AsyncIterator,
    Awaitable,
    Callable,
    Literal,
    Mapping,
    Protocol,
    TypedDict,
    runtime_checkable,
)

RequestProtocol = Literal["http", "https", "insecure", "secure"]

RequestBody = str | bytes


class FetchOptions(TypedDict):
    method: str
    headers: dict[str, str]
    body: RequestBody | None


@runtime_checkable
class FetchResponse(Protocol):
    """What a fetch function must resolve to.

    Status may be exposed as ``status_code`` or ``status``. Headers may be
    an iterable of ``(name, value)`` pairs or a mapping.
    """

    headers: Any

    def aiter_bytes(self) -> AsyncIterator[bytes]: ...

    async def json(self) -> Any: ...


FetchFunction = Callable[[str, FetchOptions], Awaitable[FetchResponse]]


@dataclass
class RequestDescriptor:
    host: str
    path: str
    method: str = "GET"
    port: int | None = None
    headers: Mapping[str, str] = field(default_factory=dict)
    request_data: RequestBody | None = None
    protocol: RequestProtocol = "https"
    timeout: int | None = None


__all__ = [
    "FetchFunction",
    "FetchOptions",
    "FetchResponse",
    "RequestBody",
    "RequestDescriptor",
    "RequestProtocol",
]
