"""Availability and suggestion use cases.

Both fetch busy time for ``[now, now + days)`` from the calendar provider,
run the availability engine, and rank the result: earliest-first for
availability, closest-to-the-requested-time for suggestions.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from meetbook.availability import SlotQuery, find_open_slots, select_earliest, select_nearest
from meetbook.availability.timeutils import Interval, now, plus_days, to_datetime, to_iso, to_utc
from meetbook.calendar_providers.base import CalendarProvider
from meetbook.config import Settings
from meetbook.errors import InvalidRequestError
from meetbook.models import (
    AvailabilityRequest,
    AvailabilityResponse,
    SlotOut,
    SuggestionOut,
    SuggestRequest,
    SuggestResponse,
)
from meetbook.models.requests import SlotWindow
from meetbook.models.responses import RequestedTime

logger = logging.getLogger(__name__)

AVAILABILITY_LIMIT = 3

Clock = Callable[[str], datetime]


def parse_instant(value: str, tz: str, field: str) -> datetime:
    try:
        return to_datetime(value, tz)
    except ValueError as exc:
        raise InvalidRequestError(f"Invalid ISO timestamp for {field}: {value!r}") from exc


class AvailabilityService:
    """Find open slots on one calendar."""

    def __init__(
        self,
        provider: CalendarProvider,
        settings: Settings,
        clock: Clock = now,
    ) -> None:
        self._provider = provider
        self._settings = settings
        self._clock = clock

    async def _open_slots(
        self, request: SlotWindow, tz: str, calendar_id: str
    ) -> list[Interval]:
        start_hour, end_hour = request.work_hours
        if start_hour >= end_hour:
            raise InvalidRequestError(
                "Invalid work hours: start hour must be before end hour"
            )

        current = self._clock(tz)
        busy = await self._provider.query_busy_periods(
            calendar_id,
            current,
            plus_days(current, request.days),
            tz,
        )

        query = SlotQuery.starting_today(
            current,
            request.days,
            request.work_hours,
            request.duration_min,
            request.buffer_min,
        )
        slots = find_open_slots(query, current, busy, tz)
        logger.info(
            "Found %d open slot(s) on %s over %d day(s) (%d busy period(s))",
            len(slots),
            calendar_id,
            request.days,
            len(busy),
        )
        return slots

    async def next_available(self, request: AvailabilityRequest) -> AvailabilityResponse:
        tz = request.tz or self._settings.timezone
        calendar_id = request.calendar_id or self._settings.google_calendar_id

        slots = await self._open_slots(request, tz, calendar_id)
        chosen = select_earliest(slots, AVAILABILITY_LIMIT)

        return AvailabilityResponse(
            time_zone=tz,
            slots=[SlotOut(**slot.to_dict()) for slot in chosen],
        )

    async def suggest(self, request: SuggestRequest) -> SuggestResponse:
        tz = request.tz or self._settings.timezone
        calendar_id = request.calendar_id or self._settings.google_calendar_id

        requested_start = parse_instant(request.requested_start_iso, tz, "requestedStartISO")
        requested_end = parse_instant(request.requested_end_iso, tz, "requestedEndISO")
        if to_utc(requested_start) >= to_utc(requested_end):
            raise InvalidRequestError("Requested start time must be before end time")

        slots = await self._open_slots(request, tz, calendar_id)
        chosen = select_nearest(slots, requested_start, request.max_suggestions)
        logger.info(
            "Suggesting %d slot(s) near %s", len(chosen), to_iso(requested_start)
        )

        return SuggestResponse(
            requested_time=RequestedTime(
                start=request.requested_start_iso,
                end=request.requested_end_iso,
            ),
            time_zone=tz,
            suggestions=[
                SuggestionOut(**slot.to_dict(), duration=request.duration_min)
                for slot in chosen
            ],
            total_available=len(slots),
        )
