"""Fetch HTML over HTTP with httpx (no JS rendering)."""

from __future__ import annotations

from dataclasses import dataclass, field

import httpx

DEFAULT_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/131.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}


@dataclass
class FetchResult:
    """Result from fetching a URL."""

    html: str
    url: str
    status: int
    headers: dict[str, str] = field(default_factory=dict)


async def fetch_static(
    url: str,
    timeout: int = 30,
    follow_redirects: bool = True,
    headers: dict[str, str] | None = None,
    verify_ssl: bool = True,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FetchResult:
    """GET `url` and return its body decoded as text."""
    request_headers = dict(DEFAULT_HEADERS)
    if headers:
        request_headers.update(headers)

    async with httpx.AsyncClient(
        timeout=timeout,
        follow_redirects=follow_redirects,
        headers=request_headers,
        verify=verify_ssl,
        transport=transport,
    ) as client:
        response = await client.get(url)
        return FetchResult(
            html=response.text,
            url=str(response.url),
            status=response.status_code,
            headers=dict(response.headers),
        )
