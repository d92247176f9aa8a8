"""GitHub REST/search API client.

Exposes one coroutine per capability the probes need. Every call waits on
the injected :class:`RateLimiter` first, and every payload is validated
against the schemas in :mod:`firstever.models` before it is returned.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Generic, TypeVar

import httpx
from pydantic import TypeAdapter, ValidationError

from firstever.errors import MalformedResponse
from firstever.models import (
    Commit,
    Event,
    Gist,
    GitHubUser,
    IssueComment,
    Organization,
    Release,
    Repository,
    SearchResult,
    SimpleUser,
    WorkflowRunList,
)
from firstever.utils.http import build_headers, fetch_json, last_page_number
from firstever.utils.ratelimit import RateLimiter

logger = logging.getLogger(__name__)

API_BASE = "https://api.github.com"

T = TypeVar("T")


@dataclass(frozen=True)
class Page(Generic[T]):
    """One page of a listing plus the number of the last page, when known."""

    items: list[T] = field(default_factory=list)
    last_page: int | None = None


@lru_cache(maxsize=None)
def _adapter(tp: Any) -> TypeAdapter[Any]:
    return TypeAdapter(tp)


def _validate(tp: Any, data: Any, path: str) -> Any:
    try:
        return _adapter(tp).validate_python(data)
    except ValidationError as exc:
        raise MalformedResponse(f"Unexpected payload from {path}: {exc.error_count()} error(s)") from exc


class GitHubClient:
    """Rate-limited, schema-validating wrapper around ``httpx.AsyncClient``."""

    def __init__(
        self,
        token: str | None,
        *,
        limiter: RateLimiter | None = None,
        base_url: str = API_BASE,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.token = token
        self.limiter = limiter or RateLimiter()
        self._http = httpx.AsyncClient(
            base_url=base_url,
            headers=build_headers(token),
            timeout=timeout,
            follow_redirects=True,
            transport=transport,
        )

    async def __aenter__(self) -> GitHubClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    # ------------------------------------------------------------------
    # Plumbing
    # ------------------------------------------------------------------

    async def _get(
        self, tp: Any, path: str, params: dict[str, Any] | None = None
    ) -> tuple[Any, httpx.Response]:
        await self.limiter.wait()
        logger.debug("GET %s %s", path, params or {})
        data, resp = await fetch_json(self._http, path, params=params)
        return _validate(tp, data, path), resp

    async def _list(self, tp: Any, path: str, **params: Any) -> Any:
        items, _ = await self._get(list[tp], path, params)
        return items

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    async def get_user(self, username: str) -> GitHubUser:
        user, _ = await self._get(GitHubUser, f"/users/{username}")
        return user

    async def list_orgs(self, username: str, *, per_page: int = 100) -> list[Organization]:
        return await self._list(Organization, f"/users/{username}/orgs", per_page=per_page)

    async def list_following(self, username: str, *, per_page: int = 100) -> list[SimpleUser]:
        return await self._list(SimpleUser, f"/users/{username}/following", per_page=per_page)

    async def list_followers(self, username: str, *, per_page: int = 100) -> list[SimpleUser]:
        return await self._list(SimpleUser, f"/users/{username}/followers", per_page=per_page)

    # ------------------------------------------------------------------
    # Repositories
    # ------------------------------------------------------------------

    async def list_user_repos(
        self,
        username: str,
        *,
        type: str = "owner",
        sort: str = "created",
        direction: str = "asc",
        per_page: int = 100,
        page: int = 1,
    ) -> list[Repository]:
        return await self._list(
            Repository,
            f"/users/{username}/repos",
            type=type,
            sort=sort,
            direction=direction,
            per_page=per_page,
            page=page,
        )

    async def list_commits(
        self,
        owner: str,
        repo: str,
        *,
        author: str | None = None,
        per_page: int = 100,
        page: int = 1,
    ) -> Page[Commit]:
        """List commits on the default branch, newest first."""
        params: dict[str, object] = {"per_page": per_page, "page": page}
        if author:
            params["author"] = author
        items, resp = await self._get(list[Commit], f"/repos/{owner}/{repo}/commits", params)
        return Page(items=items, last_page=last_page_number(resp))

    async def list_workflow_runs(
        self, owner: str, repo: str, *, per_page: int = 100
    ) -> WorkflowRunList:
        runs, _ = await self._get(
            WorkflowRunList, f"/repos/{owner}/{repo}/actions/runs", {"per_page": per_page}
        )
        return runs

    async def list_releases(self, owner: str, repo: str, *, per_page: int = 100) -> list[Release]:
        return await self._list(Release, f"/repos/{owner}/{repo}/releases", per_page=per_page)

    async def list_issue_comments(
        self, owner: str, repo: str, issue_number: int, *, per_page: int = 100
    ) -> list[IssueComment]:
        return await self._list(
            IssueComment,
            f"/repos/{owner}/{repo}/issues/{issue_number}/comments",
            per_page=per_page,
        )

    # ------------------------------------------------------------------
    # Activity
    # ------------------------------------------------------------------

    async def list_gists(self, username: str, *, per_page: int = 100) -> list[Gist]:
        return await self._list(Gist, f"/users/{username}/gists", per_page=per_page)

    async def list_starred(
        self,
        username: str,
        *,
        sort: str = "created",
        direction: str = "asc",
        per_page: int = 100,
    ) -> list[Repository]:
        return await self._list(
            Repository,
            f"/users/{username}/starred",
            sort=sort,
            direction=direction,
            per_page=per_page,
        )

    async def list_subscriptions(self, username: str, *, per_page: int = 100) -> list[Repository]:
        return await self._list(Repository, f"/users/{username}/subscriptions", per_page=per_page)

    async def list_public_events(
        self, username: str, *, per_page: int = 100, page: int = 1
    ) -> list[Event]:
        return await self._list(
            Event, f"/users/{username}/events/public", per_page=per_page, page=page
        )

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    async def search_issues(
        self, query: str, *, sort: str = "created", order: str = "asc", per_page: int = 1
    ) -> SearchResult:
        result, _ = await self._get(
            SearchResult,
            "/search/issues",
            {"q": query, "sort": sort, "order": order, "per_page": per_page},
        )
        return result
