"""Tests for FirstEverythingFetcher (orchestration and end-to-end)."""

from __future__ import annotations

import asyncio
from collections import Counter
from datetime import datetime, timezone

import httpx
import pytest

from firstever.client import GitHubClient
from firstever.errors import InvalidInputError, RemoteError
from firstever.fetcher import FirstEverythingFetcher
from firstever.models import ACTIVITY_FIELDS, AccountRecord, FirstRecord, GistRecord, ProbeSettings
from firstever.probes.base import BaseProbe, ProbeContext
from firstever.utils.ratelimit import RateLimiter


def _client(handler, token: str = "t0k") -> GitHubClient:
    return GitHubClient(token, limiter=RateLimiter(0), transport=httpx.MockTransport(handler))


class _StaticProbe(BaseProbe):
    """Probe returning a canned record after an optional delay."""

    def __init__(
        self,
        field: str,
        record: FirstRecord | None = None,
        *,
        delay: float = 0.0,
        error: Exception | None = None,
    ) -> None:
        self.field = field
        self.record = record
        self.delay = delay
        self.error = error

    async def resolve(self, ctx: ProbeContext) -> FirstRecord | None:
        await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.record


_ACCOUNT = AccountRecord(login="octo", created_at=datetime(2009, 1, 1, tzinfo=timezone.utc))
_GIST = GistRecord(id="g1", created_at=datetime(2011, 1, 1, tzinfo=timezone.utc))


# ---------------------------------------------------------------------------
# Orchestration
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_invalid_username_fails_before_any_call() -> None:
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json={})

    async with _client(handler) as client:
        fetcher = FirstEverythingFetcher(client)
        for bad in ("bad_name", "-octo"):
            with pytest.raises(InvalidInputError):
                await fetcher.fetch_first_everything(bad)
    assert calls == []


@pytest.mark.asyncio
async def test_empty_token_fails_before_any_call() -> None:
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json={})

    async with _client(handler, token="  ") as client:
        with pytest.raises(InvalidInputError, match="Token"):
            await FirstEverythingFetcher(client).fetch_first_everything("octo")
    assert calls == []


@pytest.mark.asyncio
async def test_every_key_present_when_every_call_fails() -> None:
    async with _client(lambda r: httpx.Response(500, json={"message": "boom"})) as client:
        result = await FirstEverythingFetcher(client).fetch_first_everything("octo")

    dumped = result.model_dump()
    assert set(dumped) == {"username", *ACTIVITY_FIELDS}
    assert result.username == "octo"
    assert all(dumped[name] is None for name in ACTIVITY_FIELDS)
    assert result.found_count() == 0


@pytest.mark.asyncio
async def test_failures_are_isolated() -> None:
    probes = [
        _StaticProbe("account_created", _ACCOUNT),
        _StaticProbe("first_repository", error=RemoteError("down", status=503)),
        _StaticProbe("first_commit", error=ValueError("unexpected")),
        _StaticProbe("first_gist", _GIST),
    ]
    async with _client(lambda r: httpx.Response(500)) as client:
        result = await FirstEverythingFetcher(client, probes=probes).fetch_first_everything("octo")

    assert result.account_created == _ACCOUNT
    assert result.first_gist == _GIST
    assert result.first_repository is None
    assert result.first_commit is None
    assert result.found_count() == 2


@pytest.mark.asyncio
async def test_hanging_probe_does_not_delay_siblings() -> None:
    probes = [
        _StaticProbe("first_gist", _GIST, delay=0.05),
        _StaticProbe("first_issue", delay=10.0),
        _StaticProbe("account_created", _ACCOUNT, delay=0.05),
    ]
    settings = ProbeSettings(probe_timeout=0.2)
    loop = asyncio.get_running_loop()

    async with _client(lambda r: httpx.Response(500)) as client:
        start = loop.time()
        result = await FirstEverythingFetcher(
            client, settings=settings, probes=probes
        ).fetch_first_everything("octo")
        elapsed = loop.time() - start

    assert elapsed < 2.0
    assert result.first_issue is None
    assert result.first_gist == _GIST
    assert result.account_created == _ACCOUNT


@pytest.mark.asyncio
async def test_probes_run_concurrently() -> None:
    probes = [_StaticProbe(name, delay=0.1) for name in ACTIVITY_FIELDS]
    loop = asyncio.get_running_loop()

    async with _client(lambda r: httpx.Response(500)) as client:
        start = loop.time()
        await FirstEverythingFetcher(client, probes=probes).fetch_first_everything("octo")
        elapsed = loop.time() - start

    assert elapsed < 0.1 * len(probes) / 2


# ---------------------------------------------------------------------------
# End to end over a routed mock transport
# ---------------------------------------------------------------------------


def _repo(name: str, created: str, *, fork: bool = False) -> dict:
    return {
        "name": name,
        "full_name": f"octo/{name}",
        "owner": {"login": "octo"},
        "html_url": f"https://github.com/octo/{name}",
        "fork": fork,
        "created_at": created,
    }


def _search_item(number: int, repo: str, created: str) -> dict:
    return {
        "number": number,
        "title": f"#{number}",
        "html_url": f"https://github.com/{repo}/issues/{number}",
        "repository_url": f"https://api.github.com/repos/{repo}",
        "created_at": created,
    }


class _GitHubStub:
    """Routes requests by path and counts them."""

    def __init__(self) -> None:
        self.hits: Counter[str] = Counter()

    def __call__(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        params = request.url.params
        self.hits[path] += 1

        if path == "/users/octo":
            return httpx.Response(200, json={"login": "octo", "created_at": "2009-02-03T04:05:06Z"})
        if path == "/users/octo/repos":
            return httpx.Response(
                200,
                json=[
                    _repo("dotfiles", "2010-01-01T00:00:00Z"),
                    _repo("linux", "2011-01-01T00:00:00Z", fork=True),
                ],
            )
        if path == "/repos/octo/dotfiles/commits":
            if params.get("page", "1") == "1":
                link = '<https://api.github.com/repositories/1/commits?per_page=1&page=3>; rel="last"'
                body = [{"sha": "f" * 40, "commit": {"message": "newest", "author": {"date": "2020-01-01T00:00:00Z"}}}]
                return httpx.Response(200, json=body, headers={"Link": link})
            body = [{"sha": "abc1234" + "0" * 33, "commit": {"message": "init", "author": {"date": "2010-01-02T00:00:00Z"}}}]
            return httpx.Response(200, json=body)
        if path == "/repos/octo/dotfiles/actions/runs":
            return httpx.Response(
                200,
                json={"total_count": 1, "workflow_runs": [{"id": 77, "name": "CI", "created_at": "2019-11-01T00:00:00Z"}]},
            )
        if path == "/repos/octo/linux/actions/runs":
            return httpx.Response(404, json={"message": "Not Found"})
        if path == "/repos/octo/dotfiles/releases":
            return httpx.Response(
                200,
                json=[
                    {"id": 2, "tag_name": "v2", "created_at": "2014-01-01T00:00:00Z"},
                    {"id": 1, "tag_name": "v1", "created_at": "2012-01-01T00:00:00Z"},
                ],
            )
        if path == "/repos/octo/linux/releases":
            return httpx.Response(200, json=[])
        if path == "/search/issues":
            q = params["q"]
            if q.startswith("commenter:"):
                return httpx.Response(200, json={"items": [_search_item(9, "other/proj", "2013-01-01T00:00:00Z")]})
            if "-user:octo" in q:
                return httpx.Response(200, json={"items": [_search_item(4, "other/proj", "2014-06-01T00:00:00Z")]})
            if "type:pr" in q:
                return httpx.Response(200, json={"items": [_search_item(2, "octo/dotfiles", "2012-05-01T00:00:00Z")]})
            return httpx.Response(200, json={"items": [_search_item(1, "octo/dotfiles", "2011-05-01T00:00:00Z")]})
        if path == "/repos/other/proj/issues/9/comments":
            return httpx.Response(
                200,
                json=[{"id": 5, "user": {"login": "octo"}, "created_at": "2013-02-01T00:00:00Z"}],
            )
        if path == "/users/octo/gists":
            return httpx.Response(
                200,
                json=[
                    {"id": "new", "created_at": "2016-01-01T00:00:00Z"},
                    {"id": "old", "created_at": "2012-01-01T00:00:00Z"},
                ],
            )
        if path in ("/users/octo/starred", "/users/octo/subscriptions"):
            return httpx.Response(
                200,
                json=[{"name": "git", "full_name": "git/git", "owner": {"login": "git"}, "created_at": "2008-07-23T00:00:00Z"}],
            )
        if path == "/users/octo/orgs":
            return httpx.Response(200, json=[{"login": "acme"}])
        if path == "/users/octo/following":
            return httpx.Response(200, json=[{"login": "alice", "html_url": "https://github.com/alice"}])
        if path == "/users/octo/followers":
            return httpx.Response(200, json=[])
        if path == "/users/octo/events/public":
            return httpx.Response(
                200,
                json=[
                    {"id": "3", "type": "PushEvent", "repo": {"name": "octo/dotfiles"}, "created_at": "2024-03-01T00:00:00Z"},
                    {"id": "2", "type": "PullRequestEvent", "repo": {"name": "else/x"}, "created_at": "2024-02-01T00:00:00Z"},
                    {"id": "1", "type": "WatchEvent", "repo": {"name": "else/y"}, "created_at": "2024-01-01T00:00:00Z"},
                ],
            )
        return httpx.Response(404, json={"message": "Not Found"})


@pytest.mark.asyncio
async def test_end_to_end() -> None:
    stub = _GitHubStub()
    async with _client(stub) as client:
        result = await FirstEverythingFetcher(client).fetch_first_everything("octo")

    assert result.account_created is not None
    assert result.account_created.created_at == datetime(2009, 2, 3, 4, 5, 6, tzinfo=timezone.utc)
    assert result.first_repository is not None and result.first_repository.name == "dotfiles"
    assert result.first_fork is not None and result.first_fork.name == "linux"
    assert result.first_commit is not None and result.first_commit.sha.startswith("abc1234")
    assert result.first_issue is not None and result.first_issue.number == 1
    assert result.first_pull_request is not None and result.first_pull_request.number == 2
    assert result.first_gist is not None and result.first_gist.id == "old"
    assert result.first_starred_repo is not None and result.first_starred_repo.approximate is True
    assert result.first_watch is not None and result.first_watch.full_name == "git/git"
    assert result.first_workflow_run is not None and result.first_workflow_run.id == 77
    assert result.first_release is not None and result.first_release.tag_name == "v1"
    assert result.first_organization is not None and result.first_organization.login == "acme"
    assert result.first_following is not None and result.first_following.login == "alice"
    assert result.first_follower is None
    assert result.first_public_event is not None and result.first_public_event.type == "WatchEvent"
    assert result.first_comment is not None and result.first_comment.issue_number == 9
    assert result.first_contribution is not None
    assert result.first_contribution.repository == "other/proj"
    assert result.first_contribution.type == "PullRequestEvent"
    assert result.found_count() == 16

    # Shared lookups are fetched once per run.
    assert stub.hits["/users/octo/repos"] == 1
    assert stub.hits["/users/octo/events/public"] == 1
