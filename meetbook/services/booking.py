"""Booking and cancellation use cases."""

from __future__ import annotations

import logging

from meetbook.availability import Interval, has_conflict
from meetbook.availability.timeutils import plus_minutes, to_iso
from meetbook.calendar_providers.base import CalendarEvent, CalendarProvider
from meetbook.config import Settings
from meetbook.errors import SlotUnavailableError
from meetbook.models import BookingRequest, BookingResponse, CancelRequest, CancelResponse

from .availability import parse_instant

logger = logging.getLogger(__name__)


def redact_pii(value: str) -> str:
    """Mask PII for logging: show first 3 and last 2 chars only."""
    if not value or len(value) <= 5:
        return "***"
    return value[:3] + "***" + value[-2:]


class BookingService:
    """Create and cancel meetings on the calendar."""

    def __init__(self, provider: CalendarProvider, settings: Settings) -> None:
        self._provider = provider
        self._settings = settings

    async def book(self, request: BookingRequest) -> BookingResponse:
        """Create a meeting of the configured length starting at ``startISO``.

        With ``recheck`` the calendar is queried again around the slot
        (padded by the recheck margin on both sides) and the booking is
        refused if anything now overlaps it.

        Raises:
            InvalidRequestError: ``startISO`` does not parse.
            SlotUnavailableError: the recheck found a conflict.
        """
        tz = request.tz or self._settings.timezone
        calendar_id = request.calendar_id or self._settings.booking_calendar_id

        start = parse_instant(request.start_iso, tz, "startISO")
        end = plus_minutes(start, self._settings.booking_duration_minutes)
        slot = Interval(start, end)

        logger.info(
            "Booking %s to %s (%s) on %s for %s",
            to_iso(start),
            to_iso(end),
            tz,
            calendar_id,
            redact_pii(request.attendee_email or ""),
        )

        if request.recheck:
            margin = self._settings.booking_recheck_margin_minutes
            busy = await self._provider.query_busy_periods(
                calendar_id,
                plus_minutes(start, -margin),
                plus_minutes(end, margin),
                tz,
            )
            if has_conflict(slot, busy, tz):
                logger.info("Slot %s is no longer free", to_iso(start))
                raise SlotUnavailableError("Time slot is no longer available")

        event = CalendarEvent(
            summary=request.title or self._settings.booking_title,
            start=start,
            end=end,
            time_zone=tz,
            description=request.description or "",
            attendees=[request.attendee_email] if request.attendee_email else [],
        )
        created = await self._provider.create_event(calendar_id, event)

        return BookingResponse(
            event_id=created.event_id,
            meet_link=created.meet_link,
            html_link=created.html_link,
        )

    async def cancel(self, request: CancelRequest) -> CancelResponse:
        calendar_id = request.calendar_id or self._settings.google_calendar_id
        await self._provider.cancel_event(calendar_id, request.event_id)
        return CancelResponse(ok=True)
