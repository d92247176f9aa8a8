"""Input validation run before any remote call."""

from __future__ import annotations

import re

from firstever.errors import InvalidInputError

# 1-39 alphanumerics or single hyphens; no leading, trailing or double hyphen.
USERNAME_RE = re.compile(r"^[a-zA-Z0-9](?:[a-zA-Z0-9]|-(?=[a-zA-Z0-9])){0,38}$")


def validate_username(username: str | None) -> str:
    """Return the stripped username or raise :class:`InvalidInputError`."""
    value = (username or "").strip()
    if not value:
        raise InvalidInputError("Username cannot be empty")
    if not USERNAME_RE.fullmatch(value):
        raise InvalidInputError(f"Invalid GitHub username format: {value!r}")
    return value


def validate_token(token: str | None) -> str:
    value = (token or "").strip()
    if not value:
        raise InvalidInputError("Token cannot be empty")
    return value
