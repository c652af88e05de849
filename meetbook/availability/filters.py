"""Past-slot and busy-period filtering."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from meetbook.calendar_providers.base import BusyPeriod

from .timeutils import Interval, to_datetime, to_utc


def filter_future_slots(slots: Iterable[Interval], current: datetime) -> list[Interval]:
    """Keep slots that start strictly after ``current``, in order."""
    current_utc = to_utc(current)
    return [slot for slot in slots if to_utc(slot.start) > current_utc]


def busy_interval(period: BusyPeriod, tz: str) -> Interval:
    return Interval(to_datetime(period.start, tz), to_datetime(period.end, tz))


def has_conflict(slot: Interval, busy_periods: Iterable[BusyPeriod], tz: str) -> bool:
    """Return True if ``slot`` collides with any busy period.

    A collision is a partial overlap, the slot engulfing the busy period, or
    the busy period engulfing the slot. Slots that merely touch a busy
    period at an endpoint are free.
    """
    for period in busy_periods:
        busy = busy_interval(period, tz)
        if slot.overlaps(busy) or slot.engulfs(busy) or busy.engulfs(slot):
            return True
    return False


def filter_conflicts(
    slots: Iterable[Interval], busy_periods: Iterable[BusyPeriod], tz: str
) -> list[Interval]:
    busy = list(busy_periods)
    return [slot for slot in slots if not has_conflict(slot, busy, tz)]
