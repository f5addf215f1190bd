"""Public surface for the pluggable HTTP transport layer."""

from .config import TransportOptions
from .errors import HttpClientError, ParseError, TimeoutError, TransportError
from .logger import BoundLogger, create_logger
from .transport import (
    FetchHttpClient,
    FetchHttpClientResponse,
    HttpClient,
    HttpClientResponse,
    HttpxFetch,
    HttpxHttpClient,
    HttpxHttpClientResponse,
    build_request_url,
)
from .types import FetchOptions, RequestDescriptor
from .version import __version__

__all__ = [
    "__version__",
    "BoundLogger",
    "FetchHttpClient",
    "FetchHttpClientResponse",
    "FetchOptions",
    "HttpClient",
    "HttpClientError",
    "HttpClientResponse",
    "HttpxFetch",
    "HttpxHttpClient",
    "HttpxHttpClientResponse",
    "ParseError",
    "RequestDescriptor",
    "TimeoutError",
    "TransportError",
    "TransportOptions",
    "build_request_url",
    "create_logger",
]
