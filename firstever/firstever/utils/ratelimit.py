"""Minimum-spacing rate limiter shared by every outbound API call."""

from __future__ import annotations

import asyncio


class RateLimiter:
    """Enforce at least *min_interval* seconds between the starts of calls.

    Concurrent callers are serialized: each one waits for the previous
    caller's stamp, sleeps the remainder of the interval, then stamps.
    This is plain spacing, not a token bucket; there is no burst allowance.
    """

    def __init__(self, min_interval: float = 0.15) -> None:
        if min_interval < 0:
            raise ValueError("min_interval must be >= 0")
        self.min_interval = min_interval
        self._last_call: float | None = None
        self._lock = asyncio.Lock()

    async def wait(self) -> None:
        """Return once it is safe to start the next call."""
        async with self._lock:
            loop = asyncio.get_running_loop()
            if self._last_call is not None:
                # asyncio.sleep may wake a hair early on coarse clocks.
                while (delay := self._last_call + self.min_interval - loop.time()) > 0:
                    await asyncio.sleep(delay)
            self._last_call = loop.time()
