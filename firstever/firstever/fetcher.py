"""Run every probe concurrently and merge the outcomes into one result."""

from __future__ import annotations

import asyncio
import logging

from firstever.client import GitHubClient
from firstever.errors import FirstEverError
from firstever.models import FirstEverythingResult, FirstRecord, ProbeSettings
from firstever.probes import BaseProbe, ProbeContext, get_all_probes
from firstever.validation import validate_token, validate_username

logger = logging.getLogger(__name__)


class FirstEverythingFetcher:
    """Resolve every "first" field for a user.

    A probe failure of any kind leaves its field ``None`` and logs a warning;
    only invalid input makes :meth:`fetch_first_everything` raise.
    """

    def __init__(
        self,
        client: GitHubClient,
        *,
        settings: ProbeSettings | None = None,
        probes: list[BaseProbe] | None = None,
    ) -> None:
        self.client = client
        self.settings = settings or ProbeSettings()
        self.probes = probes if probes is not None else get_all_probes()

    async def fetch_first_everything(self, username: str) -> FirstEverythingResult:
        username = validate_username(username)
        validate_token(self.client.token)

        logger.info("Analyzing GitHub user %s with %d probes", username, len(self.probes))
        ctx = ProbeContext(username, self.client, self.settings)
        fields: dict[str, FirstRecord | None] = {}
        try:
            await asyncio.gather(*(self._run_probe(probe, ctx, fields) for probe in self.probes))
        finally:
            await ctx.close()

        result = FirstEverythingResult(username=username, **fields)
        logger.info('Analysis complete: found %d different "first" items', result.found_count())
        return result

    @staticmethod
    async def _run_probe(
        probe: BaseProbe, ctx: ProbeContext, fields: dict[str, FirstRecord | None]
    ) -> None:
        name = probe.get_name()
        record: FirstRecord | None = None
        try:
            record = await probe.run(ctx)
        except FirstEverError as exc:
            logger.warning("Failed to fetch %s: %s", name, exc)
        except Exception:
            logger.warning("Failed to fetch %s", name, exc_info=True)
        else:
            if record is None:
                logger.info("No %s found for %s", name, ctx.username)
            else:
                logger.info("Found %s for %s", name, ctx.username)
        fields[probe.field] = record
