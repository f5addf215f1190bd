"""Transport implementations exposed to users."""

from .base import HttpClient, HttpClientResponse, build_request_url
from .fetch import FetchHttpClient, FetchHttpClientResponse
from .http import HttpxFetch, HttpxFetchResponse, HttpxHttpClient, HttpxHttpClientResponse

__all__ = [
    "FetchHttpClient",
    "FetchHttpClientResponse",
    "HttpClient",
    "HttpClientResponse",
    "HttpxFetch",
    "HttpxFetchResponse",
    "HttpxHttpClient",
    "HttpxHttpClientResponse",
    "build_request_url",
]
