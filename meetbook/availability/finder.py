"""End-to-end open-slot search over already-fetched busy periods."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime

from meetbook.calendar_providers.base import BusyPeriod

from .filters import filter_conflicts, filter_future_slots
from .slots import WorkHours, generate_multi_day_slots
from .timeutils import Interval, start_of_day


@dataclass(frozen=True)
class SlotQuery:
    """Slot generation parameters for one request."""

    anchor_day: datetime
    days: int
    work_hours: WorkHours
    duration_minutes: int
    buffer_minutes: int

    @classmethod
    def starting_today(
        cls,
        current: datetime,
        days: int,
        work_hours: WorkHours,
        duration_minutes: int,
        buffer_minutes: int,
    ) -> SlotQuery:
        return cls(
            anchor_day=start_of_day(current),
            days=days,
            work_hours=tuple(work_hours),
            duration_minutes=duration_minutes,
            buffer_minutes=buffer_minutes,
        )


def find_open_slots(
    query: SlotQuery,
    current: datetime,
    busy_periods: Sequence[BusyPeriod],
    tz: str,
) -> list[Interval]:
    """Generate, drop past slots, drop busy slots. Generation order is kept."""
    candidates = generate_multi_day_slots(
        query.anchor_day,
        query.days,
        query.work_hours,
        query.duration_minutes,
        query.buffer_minutes,
    )
    upcoming = filter_future_slots(candidates, current)
    return filter_conflicts(upcoming, busy_periods, tz)
