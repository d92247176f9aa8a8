"""Base probe interface and the per-run probe context."""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from typing import Any

from firstever.client import GitHubClient
from firstever.models import Event, FirstRecord, ProbeSettings, Repository
from firstever.probes.strategies import scan_until_short_page
from firstever.utils.timeout import with_timeout


class ProbeContext:
    """Everything a probe needs for one run.

    Lookups used by more than one probe (the owned-repository list and the
    public-event scan) run at most once per context; every caller awaits the
    same task through :func:`asyncio.shield`, so one probe timing out does
    not cancel work its siblings are still waiting on.
    """

    def __init__(
        self,
        username: str,
        client: GitHubClient,
        settings: ProbeSettings | None = None,
    ) -> None:
        self.username = username
        self.client = client
        self.settings = settings or ProbeSettings()
        self._shared: dict[str, asyncio.Future[Any]] = {}

    def _once(self, key: str, factory: Callable[[], Awaitable[Any]]) -> Awaitable[Any]:
        task = self._shared.get(key)
        if task is None:
            task = asyncio.ensure_future(factory())
            self._shared[key] = task
        return asyncio.shield(task)

    async def owned_repositories(self) -> list[Repository]:
        """Repositories owned by the user, oldest first (one page)."""
        return await self._once(
            "repos",
            lambda: self.client.list_user_repos(
                self.username, sort="created", direction="asc", per_page=self.settings.page_size
            ),
        )

    async def first_repository(self) -> Repository | None:
        repos = await self.owned_repositories()
        return repos[0] if repos else None

    async def public_events(self) -> list[Event]:
        """Every reachable public event, newest first as the API returns them."""
        page_size = self.settings.page_size

        async def _page(page: int) -> list[Event]:
            return await self.client.list_public_events(
                self.username, per_page=page_size, page=page
            )

        return await self._once(
            "events",
            lambda: scan_until_short_page(
                _page, page_size=page_size, max_pages=self.settings.max_event_pages
            ),
        )

    async def close(self) -> None:
        """Cancel shared lookups nobody is waiting on any more."""
        pending = list(self._shared.values())
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)


class BaseProbe(ABC):
    """One strategy resolving one field of the result aggregate."""

    field: str = ""
    fanout: bool = False

    @abstractmethod
    async def resolve(self, ctx: ProbeContext) -> FirstRecord | None:
        """Return the earliest record, ``None`` if there is none.

        Remote errors propagate; the fetcher turns them into an absent field.
        """
        ...

    def get_name(self) -> str:
        return self.field.replace("_", " ")

    def timeout_for(self, settings: ProbeSettings) -> float:
        return settings.fanout_timeout if self.fanout else settings.probe_timeout

    async def run(self, ctx: ProbeContext) -> FirstRecord | None:
        """Resolve under this probe's deadline."""
        return await with_timeout(
            self.resolve(ctx), self.timeout_for(ctx.settings), name=self.field
        )
