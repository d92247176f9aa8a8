"""Core data models for firstever.

Three groups live here:

* API payload schemas, validated at the client boundary.  Unknown keys are
  ignored; a missing required key raises, which the client reports as
  :class:`~firstever.errors.MalformedResponse`.
* "First" records, one per activity type, each carrying an identifier and a
  ``created_at`` timestamp.
* The aggregate handed to the summary/output layer.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class ProbeSettings(BaseModel, frozen=True):
    """Tunables passed to every probe."""

    probe_timeout: float = 15.0
    fanout_timeout: float = 30.0
    fanout_repo_limit: int = 20
    page_size: int = 100
    max_event_pages: int | None = None


# ---------------------------------------------------------------------------
# API payload schemas
# ---------------------------------------------------------------------------


class SimpleUser(BaseModel, frozen=True):
    login: str
    html_url: str | None = None


class GitHubUser(SimpleUser):
    name: str | None = None
    created_at: datetime | None = None


class Repository(BaseModel, frozen=True):
    name: str
    full_name: str
    owner: SimpleUser
    html_url: str | None = None
    fork: bool = False
    created_at: datetime | None = None


class CommitPerson(BaseModel, frozen=True):
    name: str | None = None
    date: datetime | None = None


class CommitDetail(BaseModel, frozen=True):
    message: str = ""
    author: CommitPerson | None = None
    committer: CommitPerson | None = None


class Commit(BaseModel, frozen=True):
    sha: str
    html_url: str | None = None
    commit: CommitDetail

    @property
    def created_at(self) -> datetime | None:
        """Author date, falling back to the committer date."""
        for person in (self.commit.author, self.commit.committer):
            if person is not None and person.date is not None:
                return person.date
        return None


class SearchIssue(BaseModel, frozen=True):
    number: int
    title: str = ""
    html_url: str | None = None
    repository_url: str
    user: SimpleUser | None = None
    created_at: datetime | None = None


class SearchResult(BaseModel, frozen=True):
    total_count: int = 0
    items: list[SearchIssue] = Field(default_factory=list)


class Gist(BaseModel, frozen=True):
    id: str
    description: str | None = None
    html_url: str | None = None
    created_at: datetime | None = None


class WorkflowRun(BaseModel, frozen=True):
    id: int
    name: str | None = None
    html_url: str | None = None
    created_at: datetime | None = None


class WorkflowRunList(BaseModel, frozen=True):
    total_count: int = 0
    workflow_runs: list[WorkflowRun] = Field(default_factory=list)


class Release(BaseModel, frozen=True):
    id: int
    tag_name: str
    name: str | None = None
    html_url: str | None = None
    created_at: datetime | None = None


class Organization(BaseModel, frozen=True):
    login: str
    description: str | None = None


class EventRepo(BaseModel, frozen=True):
    name: str


class Event(BaseModel, frozen=True):
    id: str
    type: str | None = None
    repo: EventRepo
    created_at: datetime | None = None


class IssueComment(BaseModel, frozen=True):
    id: int
    user: SimpleUser | None = None
    html_url: str | None = None
    created_at: datetime | None = None


# ---------------------------------------------------------------------------
# "First" records
# ---------------------------------------------------------------------------


class FirstRecord(BaseModel, frozen=True):
    """Common shape: every record has a (possibly unknown) timestamp."""

    created_at: datetime | None = None


class ApproximateRecord(FirstRecord):
    """A record whose timestamp or ordering is a stand-in, not an observation."""

    approximate: Literal[True] = True
    approximated_from: str


class AccountRecord(FirstRecord):
    login: str


class RepositoryRecord(FirstRecord):
    name: str
    full_name: str
    html_url: str | None = None
    fork: bool = False


class CommitRecord(FirstRecord):
    sha: str
    repository: str
    message: str = ""
    html_url: str | None = None


class IssueRecord(FirstRecord):
    number: int
    title: str = ""
    repository: str
    html_url: str | None = None


class GistRecord(FirstRecord):
    id: str
    description: str | None = None
    html_url: str | None = None


class StarredRepoRecord(ApproximateRecord):
    full_name: str
    html_url: str | None = None
    approximated_from: str = "repository.created_at"


class WatchedRepoRecord(ApproximateRecord):
    full_name: str
    html_url: str | None = None
    approximated_from: str = "repository.created_at"


class WorkflowRunRecord(FirstRecord):
    id: int
    name: str
    repository: str
    html_url: str | None = None


class ReleaseRecord(FirstRecord):
    tag_name: str
    name: str | None = None
    repository: str
    html_url: str | None = None


class LoginRecord(ApproximateRecord):
    """Organization or follow relationship; the API exposes no timestamp."""

    login: str
    html_url: str | None = None
    approximated_from: str = "listing order"


class EventRecord(FirstRecord):
    type: str
    repository: str


class CommentRecord(FirstRecord):
    issue_number: int
    repository: str
    html_url: str | None = None


class ContributionRecord(FirstRecord):
    type: str
    repository: str
    url: str


# ---------------------------------------------------------------------------
# Aggregate
# ---------------------------------------------------------------------------


class FirstEverythingResult(BaseModel, frozen=True):
    """Merged result of one run. ``None`` means not found or lookup failed."""

    username: str
    account_created: AccountRecord | None = None
    first_repository: RepositoryRecord | None = None
    first_commit: CommitRecord | None = None
    first_issue: IssueRecord | None = None
    first_pull_request: IssueRecord | None = None
    first_gist: GistRecord | None = None
    first_starred_repo: StarredRepoRecord | None = None
    first_workflow_run: WorkflowRunRecord | None = None
    first_fork: RepositoryRecord | None = None
    first_organization: LoginRecord | None = None
    first_following: LoginRecord | None = None
    first_follower: LoginRecord | None = None
    first_public_event: EventRecord | None = None
    first_release: ReleaseRecord | None = None
    first_comment: CommentRecord | None = None
    first_watch: WatchedRepoRecord | None = None
    first_contribution: ContributionRecord | None = None

    def found_count(self) -> int:
        return sum(1 for name in ACTIVITY_FIELDS if getattr(self, name) is not None)


ACTIVITY_FIELDS: tuple[str, ...] = tuple(
    name for name in FirstEverythingResult.model_fields if name != "username"
)
