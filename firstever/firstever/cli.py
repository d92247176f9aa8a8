"""CLI entry point for firstever."""

from __future__ import annotations

import asyncio
import logging
import sys
from dataclasses import replace

import click

from firstever.config import Config
from firstever.errors import InvalidInputError
from firstever.models import FirstEverythingResult


async def _run(username: str, config: Config) -> FirstEverythingResult:
    """Fetch every "first" item for *username* with one shared client."""
    from firstever.client import GitHubClient
    from firstever.fetcher import FirstEverythingFetcher
    from firstever.utils.ratelimit import RateLimiter

    async with GitHubClient(
        config.github_token,
        limiter=RateLimiter(config.min_interval),
        base_url=config.api_base,
        timeout=config.http_timeout,
    ) as client:
        fetcher = FirstEverythingFetcher(client, settings=config.probe_settings())
        return await fetcher.fetch_first_everything(username)


@click.command()
@click.option("--username", "-u", envvar="INPUT_USERNAME", default=None, help="GitHub username to analyze")
@click.option("--token", default=None, help="GitHub token (default: $INPUT_TOKEN or $GITHUB_TOKEN)")
@click.option("--json", "as_json", is_flag=True, help="Print the JSON result instead of the summary")
@click.option("--output", "-o", default=None, help="Also write the JSON result to this file")
@click.option("--fanout-repos", type=int, default=None, help="Repositories scanned for workflow runs and releases")
@click.option("--max-event-pages", type=int, default=None, help="Stop the public event scan after this many pages")
@click.option("--verbose", "-v", is_flag=True, help="Log progress of every probe")
def main(
    username: str | None,
    token: str | None,
    as_json: bool,
    output: str | None,
    fanout_repos: int | None,
    max_event_pages: int | None,
    verbose: bool,
) -> None:
    """firstever: find the first everything of a GitHub user."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = Config.from_env()
    except InvalidInputError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    overrides: dict[str, object] = {}
    if token:
        overrides["github_token"] = token
    if fanout_repos is not None:
        overrides["fanout_repo_limit"] = fanout_repos
    if max_event_pages is not None:
        overrides["max_event_pages"] = max_event_pages
    if overrides:
        config = replace(config, **overrides)

    if not as_json:
        click.echo(f"🔍 Analyzing GitHub user: {(username or '').strip()}\n")

    try:
        result = asyncio.run(_run(username or "", config))
    except InvalidInputError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    from firstever.output import append_step_summary, result_json, set_outputs, write_result
    from firstever.summary import generate_summary

    summary = generate_summary(result)
    payload = result_json(result)

    set_outputs({"results": payload, "summary": summary})
    append_step_summary(summary)
    if output:
        path = write_result(result, output)
        if not as_json:
            click.echo(f"✓ Written to {path}")

    if as_json:
        click.echo(payload)
    else:
        click.echo(summary)
        click.echo("\n✅ Successfully fetched all first items!")


if __name__ == "__main__":
    main()
