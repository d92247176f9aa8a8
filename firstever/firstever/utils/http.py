"""HTTP utilities for the GitHub API client."""

from __future__ import annotations

from typing import Any
from urllib.parse import parse_qs, urlparse

import httpx

from firstever.errors import MalformedResponse, NotFoundError, RateLimitedError, RemoteError

_DEFAULT_HEADERS = {
    "User-Agent": "firstever/0.1.0",
    "Accept": "application/vnd.github+json",
    "X-GitHub-Api-Version": "2022-11-28",
}


def build_headers(token: str | None) -> dict[str, str]:
    headers = dict(_DEFAULT_HEADERS)
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


def _parse_int(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def raise_for_github_status(resp: httpx.Response) -> None:
    """Translate an error response into the firstever error taxonomy."""
    if resp.is_success:
        return
    url = str(resp.request.url)
    status = resp.status_code
    if status == 404:
        raise NotFoundError(url)
    remaining = _parse_int(resp.headers.get("X-RateLimit-Remaining"))
    if status == 429 or (status == 403 and remaining == 0):
        raise RateLimitedError(
            f"Rate limit exceeded ({status}) for {url}",
            status=status,
            url=url,
            reset_at=_parse_int(resp.headers.get("X-RateLimit-Reset")),
        )
    raise RemoteError(f"GitHub API returned {status} for {url}", status=status, url=url)


def last_page_number(resp: httpx.Response) -> int | None:
    """Return the page number of the ``rel="last"`` link, if any."""
    last = resp.links.get("last")
    if not last or "url" not in last:
        return None
    values = parse_qs(urlparse(last["url"]).query).get("page")
    return _parse_int(values[0]) if values else None


async def fetch_json(
    client: httpx.AsyncClient,
    url: str,
    *,
    params: dict[str, Any] | None = None,
) -> tuple[Any, httpx.Response]:
    """GET *url* and return the decoded body together with the response."""
    try:
        resp = await client.get(url, params=params)
    except httpx.TransportError as exc:
        raise RemoteError(f"Request to {url} failed: {exc}", url=url) from exc
    raise_for_github_status(resp)
    try:
        return resp.json(), resp
    except ValueError as exc:
        raise MalformedResponse(f"Response from {url} is not JSON") from exc
