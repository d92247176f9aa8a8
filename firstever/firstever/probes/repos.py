"""Probes built on the user's owned repositories."""

from __future__ import annotations

from firstever.models import (
    CommitRecord,
    Release,
    ReleaseRecord,
    Repository,
    RepositoryRecord,
    WorkflowRun,
    WorkflowRunRecord,
)
from firstever.probes.base import BaseProbe, ProbeContext
from firstever.probes.strategies import fan_out_earliest


def _repository_record(repo: Repository) -> RepositoryRecord:
    return RepositoryRecord(
        name=repo.name,
        full_name=repo.full_name,
        html_url=repo.html_url,
        fork=repo.fork,
        created_at=repo.created_at,
    )


class FirstRepositoryProbe(BaseProbe):
    field = "first_repository"

    async def resolve(self, ctx: ProbeContext) -> RepositoryRecord | None:
        repo = await ctx.first_repository()
        return _repository_record(repo) if repo else None


class FirstForkProbe(BaseProbe):
    field = "first_fork"

    async def resolve(self, ctx: ProbeContext) -> RepositoryRecord | None:
        for repo in await ctx.owned_repositories():
            if repo.fork:
                return _repository_record(repo)
        return None


class FirstCommitProbe(BaseProbe):
    """Oldest commit by the user on the default branch of the first repository.

    Commits are listed newest first with no sort option, so the probe asks
    for one commit per page and jumps to the last page. The author filter
    keeps upstream history out when the first repository is a fork.
    """

    field = "first_commit"

    async def resolve(self, ctx: ProbeContext) -> CommitRecord | None:
        repo = await ctx.first_repository()
        if repo is None:
            return None
        owner = repo.owner.login
        page = await ctx.client.list_commits(
            owner, repo.name, author=ctx.username, per_page=1
        )
        if page.last_page is not None and page.last_page > 1:
            page = await ctx.client.list_commits(
                owner, repo.name, author=ctx.username, per_page=1, page=page.last_page
            )
        if not page.items:
            return None
        commit = page.items[-1]
        return CommitRecord(
            sha=commit.sha,
            repository=repo.full_name,
            message=commit.commit.message.partition("\n")[0],
            html_url=commit.html_url,
            created_at=commit.created_at,
        )


class FirstWorkflowRunProbe(BaseProbe):
    field = "first_workflow_run"
    fanout = True

    async def resolve(self, ctx: ProbeContext) -> WorkflowRunRecord | None:
        repos = (await ctx.owned_repositories())[: ctx.settings.fanout_repo_limit]

        async def _runs(repo: Repository) -> list[WorkflowRun]:
            listing = await ctx.client.list_workflow_runs(
                repo.owner.login, repo.name, per_page=ctx.settings.page_size
            )
            return listing.workflow_runs

        found = await fan_out_earliest(repos, _runs, key=lambda run: run.created_at)
        if found is None:
            return None
        repo, run = found
        return WorkflowRunRecord(
            id=run.id,
            name=run.name or "Unnamed",
            repository=repo.full_name,
            html_url=run.html_url,
            created_at=run.created_at,
        )


class FirstReleaseProbe(BaseProbe):
    field = "first_release"
    fanout = True

    async def resolve(self, ctx: ProbeContext) -> ReleaseRecord | None:
        repos = (await ctx.owned_repositories())[: ctx.settings.fanout_repo_limit]

        async def _releases(repo: Repository) -> list[Release]:
            return await ctx.client.list_releases(
                repo.owner.login, repo.name, per_page=ctx.settings.page_size
            )

        found = await fan_out_earliest(repos, _releases, key=lambda rel: rel.created_at)
        if found is None:
            return None
        repo, release = found
        return ReleaseRecord(
            tag_name=release.tag_name,
            name=release.name,
            repository=repo.full_name,
            html_url=release.html_url,
            created_at=release.created_at,
        )
