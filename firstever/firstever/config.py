"""Configuration management for firstever."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Callable, TypeVar

from firstever.errors import InvalidInputError
from firstever.models import ProbeSettings

T = TypeVar("T")


def _env(name: str, default: str, cast: Callable[[str], T]) -> T:
    raw = os.getenv(name) or default
    try:
        return cast(raw)
    except ValueError as e:
        raise InvalidInputError(f"{name} must be numeric, got {raw!r}") from e


def _optional_int(name: str) -> int | None:
    return _env(name, "", int) if os.getenv(name) else None


@dataclass(frozen=True)
class Config:
    """Global configuration."""

    github_token: str | None = None
    api_base: str = "https://api.github.com"
    http_timeout: float = 30.0
    min_interval: float = 0.15
    probe_timeout: float = 15.0
    fanout_timeout: float = 30.0
    fanout_repo_limit: int = 20
    max_event_pages: int | None = None

    @classmethod
    def from_env(cls) -> Config:
        """Build from the environment; malformed numbers raise :class:`InvalidInputError`."""
        # GitHub Actions exposes action inputs as INPUT_<NAME>.
        return cls(
            github_token=os.getenv("INPUT_TOKEN") or os.getenv("GITHUB_TOKEN"),
            api_base=os.getenv("FIRSTEVER_API_BASE", cls.api_base),
            http_timeout=_env("FIRSTEVER_HTTP_TIMEOUT", "30", float),
            min_interval=_env("FIRSTEVER_MIN_INTERVAL", "0.15", float),
            probe_timeout=_env("FIRSTEVER_PROBE_TIMEOUT", "15", float),
            fanout_timeout=_env("FIRSTEVER_FANOUT_TIMEOUT", "30", float),
            fanout_repo_limit=_env("FIRSTEVER_FANOUT_REPOS", "20", int),
            max_event_pages=_optional_int("FIRSTEVER_MAX_EVENT_PAGES"),
        )

    def probe_settings(self) -> ProbeSettings:
        return ProbeSettings(
            probe_timeout=self.probe_timeout,
            fanout_timeout=self.fanout_timeout,
            fanout_repo_limit=self.fanout_repo_limit,
            max_event_pages=self.max_event_pages,
        )
