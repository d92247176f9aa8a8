"""Human-readable rendering of a FirstEverythingResult."""

from __future__ import annotations

from datetime import datetime

from firstever.models import ApproximateRecord, FirstEverythingResult, FirstRecord


def _date(record: FirstRecord) -> str:
    ts: datetime | None = record.created_at
    if ts is None:
        return "Unknown date"
    prefix = "≈" if isinstance(record, ApproximateRecord) else ""
    return f"{prefix}{ts.date().isoformat()}"


def generate_summary(result: FirstEverythingResult) -> str:
    """Return the multi-line report printed to the console and step summary."""
    lines = [f"📊 First Everything Report for @{result.username}", "=" * 60]
    r = result

    if r.account_created:
        lines.append(f"👤 Account created: {_date(r.account_created)}")
    if r.first_repository:
        lines.append(f"📂 First repository: {r.first_repository.name} ({_date(r.first_repository)})")
    if r.first_commit:
        lines.append(f"💾 First commit: {r.first_commit.sha[:7]} ({_date(r.first_commit)})")
    if r.first_issue:
        lines.append(f"🐛 First issue: #{r.first_issue.number} ({_date(r.first_issue)})")
    if r.first_pull_request:
        lines.append(f"🔀 First PR: #{r.first_pull_request.number} ({_date(r.first_pull_request)})")
    if r.first_gist:
        lines.append(f"📝 First gist: {r.first_gist.id} ({_date(r.first_gist)})")
    if r.first_starred_repo:
        lines.append(
            f"⭐ First starred repo: {r.first_starred_repo.full_name} ({_date(r.first_starred_repo)})"
        )
    if r.first_workflow_run:
        lines.append(
            f"⚡ First workflow run: {r.first_workflow_run.name} ({_date(r.first_workflow_run)})"
        )
    if r.first_fork:
        lines.append(f"🍴 First fork: {r.first_fork.name} ({_date(r.first_fork)})")
    if r.first_organization:
        lines.append(f"🏢 First organization: {r.first_organization.login}")
    if r.first_following:
        lines.append(f"👥 First following: {r.first_following.login}")
    if r.first_follower:
        lines.append(f"👥 First follower: {r.first_follower.login}")
    if r.first_public_event:
        lines.append(
            f"📅 First public event: {r.first_public_event.type} ({_date(r.first_public_event)})"
        )
    if r.first_release:
        lines.append(f"🚀 First release: {r.first_release.tag_name} ({_date(r.first_release)})")
    if r.first_comment:
        lines.append(
            f"💬 First comment: On issue #{r.first_comment.issue_number} ({_date(r.first_comment)})"
        )
    if r.first_watch:
        lines.append(f"👀 First watched repo: {r.first_watch.full_name} ({_date(r.first_watch)})")
    if r.first_contribution:
        c = r.first_contribution
        lines.append(f"🤝 First contribution: {c.type} to {c.repository} ({_date(c)})")

    lines.append(f'\n🔍 Found {result.found_count()} different "first" items!')
    return "\n".join(lines)
