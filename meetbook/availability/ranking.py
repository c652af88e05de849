"""Ordering and truncation of open slots."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from .timeutils import Interval, minutes_between, to_utc


def select_earliest(slots: Iterable[Interval], limit: int) -> list[Interval]:
    """The ``limit`` slots with the earliest start instants, ascending."""
    return sorted(slots, key=lambda slot: to_utc(slot.start))[:max(limit, 0)]


def select_nearest(
    slots: Iterable[Interval], requested: datetime, limit: int
) -> list[Interval]:
    """The ``limit`` slots whose start is closest to ``requested``.

    Equal distances keep their input order (``sorted`` is stable).
    """
    return sorted(slots, key=lambda slot: minutes_between(slot.start, requested))[
        :max(limit, 0)
    ]
