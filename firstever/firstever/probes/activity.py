"""Probes over gists, stars, subscriptions and the public event feed."""

from __future__ import annotations

import asyncio
import logging

from firstever.errors import MalformedResponse
from firstever.models import (
    ContributionRecord,
    EventRecord,
    GistRecord,
    StarredRepoRecord,
    WatchedRepoRecord,
)
from firstever.probes.base import BaseProbe, ProbeContext
from firstever.probes.search import split_repository_url
from firstever.probes.strategies import earliest

logger = logging.getLogger(__name__)

_WEB_BASE = "https://github.com"

CONTRIBUTION_EVENT_TYPES = frozenset({"PushEvent", "PullRequestEvent", "IssuesEvent", "ForkEvent"})


class FirstGistProbe(BaseProbe):
    """The gist listing has no sort option; one page is sorted locally."""

    field = "first_gist"

    async def resolve(self, ctx: ProbeContext) -> GistRecord | None:
        gists = await ctx.client.list_gists(ctx.username, per_page=ctx.settings.page_size)
        gist = earliest(gists, key=lambda g: g.created_at)
        if gist is None:
            return None
        return GistRecord(
            id=gist.id,
            description=gist.description,
            html_url=gist.html_url,
            created_at=gist.created_at,
        )


class FirstStarredRepoProbe(BaseProbe):
    field = "first_starred_repo"

    async def resolve(self, ctx: ProbeContext) -> StarredRepoRecord | None:
        repos = await ctx.client.list_starred(
            ctx.username, sort="created", direction="asc", per_page=1
        )
        if not repos:
            return None
        repo = repos[0]
        return StarredRepoRecord(
            full_name=repo.full_name, html_url=repo.html_url, created_at=repo.created_at
        )


class FirstWatchProbe(BaseProbe):
    """Head of the *target user's* subscriptions, not the token owner's."""

    field = "first_watch"

    async def resolve(self, ctx: ProbeContext) -> WatchedRepoRecord | None:
        repos = await ctx.client.list_subscriptions(ctx.username, per_page=1)
        if not repos:
            return None
        repo = repos[0]
        return WatchedRepoRecord(
            full_name=repo.full_name, html_url=repo.html_url, created_at=repo.created_at
        )


class FirstPublicEventProbe(BaseProbe):
    field = "first_public_event"

    async def resolve(self, ctx: ProbeContext) -> EventRecord | None:
        event = earliest(await ctx.public_events(), key=lambda e: e.created_at)
        if event is None:
            return None
        return EventRecord(
            type=event.type or "UnknownEvent",
            repository=event.repo.name,
            created_at=event.created_at,
        )


class FirstContributionProbe(BaseProbe):
    """Earliest contribution-shaped activity on a repository the user does not own.

    Two sources are merged: pull requests found by search (full history, but
    search-index lag applies) and the public event feed (recent window only).
    """

    field = "first_contribution"
    search_depth = 10

    async def resolve(self, ctx: ProbeContext) -> ContributionRecord | None:
        outcomes = await asyncio.gather(
            self._from_search(ctx), self._from_events(ctx), return_exceptions=True
        )
        errors = [o for o in outcomes if isinstance(o, BaseException)]
        if len(errors) == len(outcomes):
            raise errors[0]
        for error in errors:
            logger.info("Contribution source failed for %s: %s", ctx.username, error)
        candidates = [o for o in outcomes if isinstance(o, ContributionRecord)]
        return earliest(candidates, key=lambda r: r.created_at)

    @staticmethod
    def _is_foreign(ctx: ProbeContext, full_name: str) -> bool:
        return not full_name.lower().startswith(f"{ctx.username.lower()}/")

    async def _from_search(self, ctx: ProbeContext) -> ContributionRecord | None:
        result = await ctx.client.search_issues(
            f"author:{ctx.username} type:pr -user:{ctx.username}",
            sort="created",
            order="asc",
            per_page=self.search_depth,
        )
        for item in result.items:
            try:
                owner, repo = split_repository_url(item.repository_url)
            except MalformedResponse as e:
                logger.debug("Skipping search item for %s: %s", ctx.username, e)
                continue
            full_name = f"{owner}/{repo}"
            if self._is_foreign(ctx, full_name):
                return ContributionRecord(
                    type="PullRequestEvent",
                    repository=full_name,
                    url=item.html_url or f"{_WEB_BASE}/{full_name}",
                    created_at=item.created_at,
                )
        return None

    async def _from_events(self, ctx: ProbeContext) -> ContributionRecord | None:
        events = [
            e
            for e in await ctx.public_events()
            if e.type in CONTRIBUTION_EVENT_TYPES and self._is_foreign(ctx, e.repo.name)
        ]
        event = earliest(events, key=lambda e: e.created_at)
        if event is None:
            return None
        return ContributionRecord(
            type=event.type or "UnknownEvent",
            repository=event.repo.name,
            url=f"{_WEB_BASE}/{event.repo.name}",
            created_at=event.created_at,
        )
