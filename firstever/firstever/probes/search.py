"""Probes answered by the issue search endpoint."""

from __future__ import annotations

from urllib.parse import urlparse

from firstever.errors import MalformedResponse
from firstever.models import CommentRecord, IssueComment, IssueRecord, SearchIssue
from firstever.probes.base import BaseProbe, ProbeContext
from firstever.probes.strategies import fan_out_earliest


def split_repository_url(url: str) -> tuple[str, str]:
    """Return ``(owner, repo)`` from an API URL like ``.../repos/owner/repo``."""
    segments = [s for s in urlparse(url).path.split("/") if s]
    if len(segments) < 3 or segments[-3] != "repos":
        raise MalformedResponse(f"Cannot derive owner/repo from {url!r}")
    return segments[-2], segments[-1]


def _issue_record(item: SearchIssue) -> IssueRecord:
    owner, repo = split_repository_url(item.repository_url)
    return IssueRecord(
        number=item.number,
        title=item.title,
        repository=f"{owner}/{repo}",
        html_url=item.html_url,
        created_at=item.created_at,
    )


class FirstIssueProbe(BaseProbe):
    field = "first_issue"
    kind = "issue"

    async def resolve(self, ctx: ProbeContext) -> IssueRecord | None:
        result = await ctx.client.search_issues(
            f"author:{ctx.username} type:{self.kind}", sort="created", order="asc", per_page=1
        )
        if not result.items:
            return None
        return _issue_record(result.items[0])


class FirstPullRequestProbe(FirstIssueProbe):
    field = "first_pull_request"
    kind = "pr"


class FirstCommentProbe(BaseProbe):
    """Earliest comment by the user among the oldest issues they commented on.

    Search sorts by the *issue's* creation date, so the comments of every
    candidate are fetched and reduced to a global minimum.
    """

    field = "first_comment"
    fanout = True
    candidate_count = 5

    async def resolve(self, ctx: ProbeContext) -> CommentRecord | None:
        result = await ctx.client.search_issues(
            f"commenter:{ctx.username}", sort="created", order="asc", per_page=self.candidate_count
        )
        login = ctx.username.lower()

        async def _own_comments(issue: SearchIssue) -> list[IssueComment]:
            owner, repo = split_repository_url(issue.repository_url)
            comments = await ctx.client.list_issue_comments(
                owner, repo, issue.number, per_page=ctx.settings.page_size
            )
            return [c for c in comments if c.user is not None and c.user.login.lower() == login]

        found = await fan_out_earliest(result.items, _own_comments, key=lambda c: c.created_at)
        if found is None:
            return None
        issue, comment = found
        owner, repo = split_repository_url(issue.repository_url)
        return CommentRecord(
            issue_number=issue.number,
            repository=f"{owner}/{repo}",
            html_url=comment.html_url,
            created_at=comment.created_at,
        )
