"""Error types raised while resolving "first" events."""

from __future__ import annotations


class FirstEverError(Exception):
    """Base class for every error raised by firstever."""


class InvalidInputError(FirstEverError):
    """Raised before any remote call when the username or token is unusable."""


class NotFoundError(FirstEverError):
    """The requested remote resource does not exist (HTTP 404)."""

    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(f"Not found: {url}")


class RemoteError(FirstEverError):
    """The API answered with an error status or could not be reached."""

    def __init__(self, message: str, *, status: int | None = None, url: str = "") -> None:
        self.status = status
        self.url = url
        super().__init__(message)


class RateLimitedError(RemoteError):
    """The API rejected the call because the quota is exhausted."""

    def __init__(self, message: str, *, status: int, url: str, reset_at: int | None = None) -> None:
        self.reset_at = reset_at
        super().__init__(message, status=status, url=url)


class MalformedResponse(FirstEverError):
    """A payload (or a value derived from one) did not have the expected shape."""


class ProbeTimeout(FirstEverError):
    """A probe did not finish before its deadline."""

    def __init__(self, name: str, seconds: float) -> None:
        self.name = name
        self.seconds = seconds
        super().__init__(f"{name} timed out after {seconds:g}s")
