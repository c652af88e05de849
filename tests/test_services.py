"""Tests for the availability, suggestion and booking use cases."""

import logging
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from meetbook.calendar_providers.base import BusyPeriod
from meetbook.errors import EventNotFoundError, InvalidRequestError, SlotUnavailableError
from meetbook.models import AvailabilityRequest, BookingRequest, CancelRequest, SuggestRequest
from meetbook.services import AvailabilityService, BookingService
from meetbook.services.booking import redact_pii

LA = ZoneInfo("America/Los_Angeles")


def _busy(start, end, day=2):
    return BusyPeriod(
        start=f"2024-01-0{day}T{start}:00-08:00", end=f"2024-01-0{day}T{end}:00-08:00"
    )


# ── Availability ────────────────────────────────────────────────────


class TestNextAvailable:
    @pytest.fixture
    def service(self, provider, settings, fixed_clock):
        return AvailabilityService(provider, settings, clock=fixed_clock)

    async def test_three_earliest_free_slots(self, service, provider):
        provider.busy = [_busy("11:00", "12:00")]

        result = await service.next_available(AvailabilityRequest())

        assert result.time_zone == "America/Los_Angeles"
        assert [(s.start, s.end) for s in result.slots] == [
            ("2024-01-02T12:10:00.000-08:00", "2024-01-02T12:55:00.000-08:00"),
            ("2024-01-02T12:55:00.000-08:00", "2024-01-02T13:40:00.000-08:00"),
            ("2024-01-02T13:40:00.000-08:00", "2024-01-02T14:25:00.000-08:00"),
        ]

    async def test_queries_busy_time_for_the_window(self, service, provider):
        await service.next_available(AvailabilityRequest(days=3))

        calendar_id, time_min, time_max, tz = provider.busy_queries[0]
        assert calendar_id == "primary"
        assert time_min == datetime(2024, 1, 2, 10, 0, tzinfo=LA)
        assert time_max - time_min == timedelta(days=3)
        assert tz == "America/Los_Angeles"

    async def test_request_overrides_zone_and_calendar(self, service, provider):
        request = AvailabilityRequest(tz="America/New_York", calendarId="team")

        result = await service.next_available(request)

        assert provider.busy_queries[0][0] == "team"
        assert provider.busy_queries[0][3] == "America/New_York"
        assert result.time_zone == "America/New_York"
        # 10:00 in LA is 13:00 in New York; first slot after that is 13:40
        assert result.slots[0].start == "2024-01-02T13:40:00.000-05:00"

    async def test_rolls_over_to_next_day(self, service, provider):
        provider.busy = [_busy("00:00", "23:59")]

        result = await service.next_available(AvailabilityRequest(days=2))

        assert result.slots[0].start == "2024-01-03T09:10:00.000-08:00"

    async def test_nothing_free(self, service, provider):
        provider.busy = [_busy("00:00", "23:59")]
        result = await service.next_available(AvailabilityRequest(days=1))
        assert result.slots == []

    async def test_reversed_work_hours_rejected(self, service, provider):
        with pytest.raises(InvalidRequestError, match="Invalid work hours"):
            await service.next_available(AvailabilityRequest(workHours=(18, 9)))
        assert provider.busy_queries == []


# ── Suggestions ─────────────────────────────────────────────────────


class TestSuggest:
    @pytest.fixture
    def service(self, provider, settings, fixed_clock):
        return AvailabilityService(provider, settings, clock=fixed_clock)

    def _request(self, start="2024-01-02T15:00:00-08:00", end="2024-01-02T15:45:00-08:00", **kw):
        return SuggestRequest(requestedStartISO=start, requestedEndISO=end, days=1, **kw)

    async def test_closest_slots_first(self, service):
        result = await service.suggest(self._request(maxSuggestions=3))

        assert [s.start[11:16] for s in result.suggestions] == ["15:10", "14:25", "15:55"]
        assert all(s.duration == 45 for s in result.suggestions)
        assert result.total_available == 9
        assert result.requested_time.start == "2024-01-02T15:00:00-08:00"

    async def test_default_limit_is_five(self, service):
        result = await service.suggest(self._request())
        assert len(result.suggestions) == 5

    async def test_busy_slots_are_not_suggested(self, service, provider):
        provider.busy = [_busy("15:00", "16:00")]

        result = await service.suggest(self._request(maxSuggestions=2))

        assert [s.start[11:16] for s in result.suggestions] == ["13:40", "16:40"]
        assert result.total_available == 6

    async def test_start_after_end_rejected(self, service, provider):
        with pytest.raises(InvalidRequestError, match="before end"):
            await service.suggest(
                self._request(start="2024-01-02T16:00:00-08:00", end="2024-01-02T15:00:00-08:00")
            )
        assert provider.busy_queries == []

    async def test_unparsable_time_rejected(self, service):
        with pytest.raises(InvalidRequestError, match="requestedStartISO"):
            await service.suggest(self._request(start="next tuesday"))


# ── Booking ─────────────────────────────────────────────────────────


class TestBook:
    @pytest.fixture
    def service(self, provider, settings):
        return BookingService(provider, settings)

    @pytest.fixture
    def request_body(self):
        return BookingRequest(
            startISO="2024-01-03T10:00:00-08:00",
            attendeeEmail="lead@example.com",
            description="Intro call",
        )

    async def test_creates_thirty_minute_event(self, service, provider, request_body):
        result = await service.book(request_body)

        assert result.event_id == "evt_123"
        assert result.meet_link == "https://meet.google.com/abc-defg-hij"
        calendar_id, event = provider.created[0]
        assert calendar_id == "bookings@group.calendar.google.com"
        assert event.summary == "Consultation call"
        assert event.end - event.start == timedelta(minutes=30)
        assert event.time_zone == "America/Los_Angeles"
        assert event.attendees == ["lead@example.com"]
        assert event.description == "Intro call"
        assert event.conference is True

    async def test_recheck_window_is_padded(self, service, provider, request_body):
        await service.book(request_body)

        _, time_min, time_max, _ = provider.busy_queries[0]
        assert time_min == datetime(2024, 1, 3, 9, 50, tzinfo=LA)
        assert time_max == datetime(2024, 1, 3, 10, 40, tzinfo=LA)

    async def test_conflict_refuses_booking(self, service, provider, request_body):
        provider.busy = [_busy("10:15", "10:45", day=3)]

        with pytest.raises(SlotUnavailableError, match="no longer available"):
            await service.book(request_body)
        assert provider.created == []

    async def test_adjacent_busy_time_is_fine(self, service, provider, request_body):
        provider.busy = [_busy("09:30", "10:00", day=3), _busy("10:30", "11:00", day=3)]
        result = await service.book(request_body)
        assert result.event_id == "evt_123"

    async def test_skip_recheck(self, service, provider):
        provider.busy = [_busy("10:00", "10:30", day=3)]
        body = BookingRequest(startISO="2024-01-03T10:00:00-08:00", recheck=False, title="Demo")

        await service.book(body)

        assert provider.busy_queries == []
        _, event = provider.created[0]
        assert event.summary == "Demo"
        assert event.attendees == []

    async def test_naive_start_read_in_request_zone(self, service, provider):
        body = BookingRequest(startISO="2024-01-03T10:00:00", tz="Europe/Lisbon")
        await service.book(body)
        _, event = provider.created[0]
        assert event.start.utcoffset() == timedelta(0)
        assert event.time_zone == "Europe/Lisbon"

    async def test_bad_start_rejected(self, service):
        with pytest.raises(InvalidRequestError):
            await service.book(BookingRequest(startISO="soon"))


class TestCancel:
    async def test_cancels_on_default_calendar(self, provider, settings):
        result = await BookingService(provider, settings).cancel(CancelRequest(eventId="evt_1"))
        assert result.ok is True
        assert provider.cancelled == [("primary", "evt_1")]

    async def test_missing_event_propagates(self, provider, settings):
        provider.cancel_error = EventNotFoundError("Event not found")
        with pytest.raises(EventNotFoundError):
            await BookingService(provider, settings).cancel(
                CancelRequest(eventId="evt_404", calendarId="team")
            )


# ── Log redaction ───────────────────────────────────────────────────


class TestRedactPii:
    def test_redacts_phone(self):
        assert redact_pii("+15551234567") == "+15***67"

    def test_redacts_email(self):
        assert redact_pii("lead@example.com") == "lea***om"

    @pytest.mark.parametrize("value", ["", "a", "abcde"])
    def test_redacts_short_value(self, value):
        assert redact_pii(value) == "***"

    async def test_booking_log_hides_attendee(self, provider, settings, caplog):
        caplog.set_level(logging.INFO, logger="meetbook.services.booking")
        body = BookingRequest(startISO="2024-01-03T10:00:00-08:00", attendeeEmail="lead@example.com")

        await BookingService(provider, settings).book(body)

        assert "lea***om" in caplog.text
        assert "lead@example.com" not in caplog.text
