"""Exceptions raised by the pluggable HTTP transports."""

from __future__ import annotations

from typing import Any


class HttpClientError(Exception):
    """Base error for all transport failures."""

    def __init__(self, message: str, *, context: Any | None = None) -> None:
        super().__init__(message)
        self.context = context


class TimeoutError(HttpClientError):
    """Raised when a request does not settle before its timeout."""

    code = "ETIMEDOUT"


class TransportError(HttpClientError):
    """Raised by the bundled backends when the network call itself fails."""


class ParseError(HttpClientError):
    """Raised when a response body cannot be parsed."""


__all__ = [
    "HttpClientError",
    "ParseError",
    "TimeoutError",
    "TransportError",
]
