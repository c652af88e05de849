"""Shared fixtures: settings, a fixed clock and an in-memory calendar provider."""

import os
import sys
from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from meetbook.calendar_providers.base import (
    BusyPeriod,
    CalendarEvent,
    CalendarProvider,
    CreatedEvent,
)
from meetbook.config import Settings

TZ = "America/Los_Angeles"
LA = ZoneInfo(TZ)


class FakeCalendarProvider(CalendarProvider):
    """Records calls and serves canned busy periods."""

    def __init__(self, busy=None):
        self.busy: list[BusyPeriod] = list(busy or [])
        self.busy_queries: list[tuple] = []
        self.created: list[tuple[str, CalendarEvent]] = []
        self.cancelled: list[tuple[str, str]] = []
        self.cancel_error: Exception | None = None
        self.created_event = CreatedEvent(
            event_id="evt_123",
            meet_link="https://meet.google.com/abc-defg-hij",
            html_link="https://calendar.google.com/event?eid=evt_123",
        )

    async def query_busy_periods(self, calendar_id, time_min, time_max, time_zone):
        self.busy_queries.append((calendar_id, time_min, time_max, time_zone))
        return list(self.busy)

    async def create_event(self, calendar_id, event):
        self.created.append((calendar_id, event))
        return self.created_event

    async def cancel_event(self, calendar_id, event_id):
        if self.cancel_error is not None:
            raise self.cancel_error
        self.cancelled.append((calendar_id, event_id))


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        api_secret_key="secret",
        timezone=TZ,
        google_calendar_id="primary",
        booking_calendar_id="bookings@group.calendar.google.com",
        booking_title="Consultation call",
        bland_api_key="bland-key",
    )


@pytest.fixture
def provider():
    return FakeCalendarProvider()


@pytest.fixture
def fixed_clock():
    """Clock frozen at 2024-01-02 10:00 local time (a Tuesday)."""

    def clock(tz: str) -> datetime:
        return datetime(2024, 1, 2, 10, 0, tzinfo=LA).astimezone(ZoneInfo(tz))

    return clock
