"""Candidate slot generation inside daily work hours."""

from __future__ import annotations

from datetime import datetime

from .timeutils import Interval, at_hour, plus_days, plus_minutes, to_utc

WorkHours = tuple[int, int]


def generate_day_slots(
    day: datetime,
    work_hours: WorkHours,
    duration_minutes: int,
    buffer_minutes: int,
) -> list[Interval]:
    """Return the candidate slots for one local day.

    The cursor walks the work window in steps of ``duration_minutes`` and
    each candidate is shifted forward by ``buffer_minutes`` from the cursor.
    Consecutive slots are therefore ``duration_minutes`` apart, not
    ``duration_minutes + buffer_minutes``; existing callers rely on this
    grid, so keep it.

    Args:
        day: Any instant on the target local date; only its date and zone
            are used.
        work_hours: ``(start_hour, end_hour)`` in local time.
        duration_minutes: Length of every slot.
        buffer_minutes: Offset applied to each slot start.

    Returns:
        Slots in chronological order. Empty when the work window is empty
        or reversed, when the duration is not positive, or when a single
        slot does not fit.
    """
    start_hour, end_hour = work_hours
    if start_hour >= end_hour or duration_minutes <= 0:
        return []

    day_start = at_hour(day, start_hour)
    day_end = at_hour(day, end_hour)
    day_end_utc = to_utc(day_end)

    slots: list[Interval] = []
    cursor = day_start
    while to_utc(plus_minutes(cursor, duration_minutes - buffer_minutes)) <= day_end_utc:
        slot_start = plus_minutes(cursor, buffer_minutes)
        slot_end = plus_minutes(cursor, duration_minutes + buffer_minutes)
        if to_utc(slot_end) <= day_end_utc:
            slots.append(Interval(slot_start, slot_end))
        cursor = plus_minutes(cursor, duration_minutes)

    return slots


def generate_multi_day_slots(
    anchor_day: datetime,
    days: int,
    work_hours: WorkHours,
    duration_minutes: int,
    buffer_minutes: int,
) -> list[Interval]:
    """Concatenate :func:`generate_day_slots` for ``days`` consecutive days."""
    slots: list[Interval] = []
    for offset in range(days):
        slots.extend(
            generate_day_slots(
                plus_days(anchor_day, offset),
                work_hours,
                duration_minutes,
                buffer_minutes,
            )
        )
    return slots
