"""Batch helpers for the mark-as-read pipeline."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Iterable, Sequence
from typing import TypeVar

T = TypeVar("T")


def chunked(items: Sequence[T], size: int) -> list[list[T]]:
    """Split ``items`` into consecutive lists of at most ``size`` elements."""
    if size < 1:
        raise ValueError(f"Batch size must be positive, got {size}")
    return [list(items[i:i + size]) for i in range(0, len(items), size)]


async def join_outcomes(units: Iterable[Awaitable[Exception | None]]) -> list[Exception | None]:
    """Run every unit concurrently and wait for all of them.

    Each unit reports its own outcome (``None`` or the error) instead of
    raising, so one failure never cancels its siblings. Results come back
    in submission order.
    """
    return list(await asyncio.gather(*units))
