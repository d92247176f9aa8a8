"""firstever: find the chronologically first everything of a GitHub user."""

from firstever.client import GitHubClient
from firstever.fetcher import FirstEverythingFetcher
from firstever.models import FirstEverythingResult, ProbeSettings
from firstever.utils.ratelimit import RateLimiter

__all__ = [
    "FirstEverythingFetcher",
    "FirstEverythingResult",
    "GitHubClient",
    "ProbeSettings",
    "RateLimiter",
]
