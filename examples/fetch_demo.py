"""Issue a few requests through both transports and print what comes back."""

from __future__ import annotations

import asyncio
import os

from pluggable_http import (
    FetchHttpClient,
    HttpClient,
    HttpxFetch,
    HttpxHttpClient,
    ParseError,
    RequestDescriptor,
    TimeoutError,
    TransportOptions,
)

HOST = os.getenv("PLUGGABLE_HTTP_DEMO_HOST", "httpbin.org")
PROTOCOL = os.getenv("PLUGGABLE_HTTP_DEMO_PROTOCOL", "https")


def log_section(title: str) -> None:
    print("\n" + "=" * 80)
    print(title)
    print("=" * 80)


async def show_json(client: HttpClient) -> None:
    log_section(f"[{client.get_client_name()}] GET /json")
    response = await client.send(RequestDescriptor(host=HOST, path="/json", protocol=PROTOCOL))
    print("status:", response.status_code)
    print("content-type:", response.headers.get("content-type") or response.headers.get("Content-Type"))
    try:
        body = await response.to_json()
    except ParseError as exc:
        print("body was not JSON:", exc)
        return
    print("keys:", sorted(body))


async def show_stream(client: HttpClient) -> None:
    log_section(f"[{client.get_client_name()}] streaming GET /bytes/64")
    response = await client.make_request(HOST, None, "/bytes/64", "GET", {}, None, PROTOCOL, 10_000)
    total = 0
    async for chunk in response.to_stream(lambda: print("response metadata is final")):
        total += len(chunk)
    print("received bytes:", total)


async def show_timeout(client: HttpClient) -> None:
    log_section(f"[{client.get_client_name()}] GET /delay/3 with a 100ms timeout")
    try:
        await client.make_request(HOST, None, "/delay/3", "GET", {}, None, PROTOCOL, 100)
    except TimeoutError as exc:
        print(f"timed out ({exc.code}): {exc}")


async def main() -> None:
    options = TransportOptions.from_env()
    async with HttpxFetch() as fetch:
        fetch_client = FetchHttpClient(fetch, options=options)
        await show_json(fetch_client)
        await show_stream(fetch_client)
        await show_timeout(fetch_client)

    async with HttpxHttpClient(options=options) as httpx_client:
        await show_json(httpx_client)
        await show_stream(httpx_client)
        await show_timeout(httpx_client)


if __name__ == "__main__":
    asyncio.run(main())
