"""Per-probe deadline."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from typing import TypeVar

from firstever.errors import ProbeTimeout

T = TypeVar("T")


async def with_timeout(aw: Awaitable[T], seconds: float, *, name: str = "operation") -> T:
    """Await *aw*, raising :class:`ProbeTimeout` if it takes longer than *seconds*.

    The timed-out operation is cancelled; its partial work is discarded.
    """
    try:
        return await asyncio.wait_for(aw, timeout=seconds)
    except asyncio.TimeoutError as exc:
        raise ProbeTimeout(name, seconds) from exc
