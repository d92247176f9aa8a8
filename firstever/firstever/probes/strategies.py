"""Retrieval strategies shared by several probes."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable, Sequence
from datetime import datetime
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
P = TypeVar("P")


def earliest(items: Iterable[T], key: Callable[[T], datetime | None]) -> T | None:
    """Return the item with the smallest timestamp.

    Items without a timestamp lose to any item that has one. On ties the
    item seen first wins, so the result is stable for a given input order.
    """
    best: T | None = None
    best_ts: datetime | None = None
    for item in items:
        ts = key(item)
        if best is None or (ts is not None and (best_ts is None or ts < best_ts)):
            best, best_ts = item, ts
    return best


async def scan_until_short_page(
    fetch_page: Callable[[int], Awaitable[Sequence[T]]],
    *,
    page_size: int,
    max_pages: int | None = None,
) -> list[T]:
    """Fetch pages 1, 2, ... until one is empty or shorter than *page_size*.

    A failure on the first page propagates. A failure on a later page ends
    the scan with the items collected so far; the events API, for one,
    rejects page numbers past its retention window.
    """
    collected: list[T] = []
    page = 1
    while max_pages is None or page <= max_pages:
        try:
            batch = await fetch_page(page)
        except Exception:
            if page == 1:
                raise
            logger.info("Stopping page scan at page %d", page, exc_info=True)
            break
        collected.extend(batch)
        if len(batch) < page_size:
            break
        page += 1
    return collected


async def fan_out_earliest(
    parents: Iterable[P],
    fetch_children: Callable[[P], Awaitable[Iterable[T]]],
    key: Callable[[T], datetime | None],
) -> tuple[P, T] | None:
    """Query every parent and return the globally earliest ``(parent, child)``.

    Each parent's children are reduced to a local minimum first. Parents
    whose query raises are skipped; ``None`` means no parent produced a child.
    """
    parent_list = list(parents)

    async def _local(parent: P) -> tuple[P, T] | None:
        child = earliest(await fetch_children(parent), key)
        return None if child is None else (parent, child)

    outcomes = await asyncio.gather(*(_local(p) for p in parent_list), return_exceptions=True)

    candidates: list[tuple[P, T]] = []
    for parent, outcome in zip(parent_list, outcomes):
        if isinstance(outcome, BaseException):
            logger.debug("Skipping %r: %s", parent, outcome)
            continue
        if outcome is not None:
            candidates.append(outcome)
    return earliest(candidates, lambda pair: key(pair[1]))
