"""Abstract base class for calendar providers.

Defines the interface for querying busy time and creating or cancelling
events. Any calendar backend (Google, Outlook, etc.) implements this ABC.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional


@dataclass(frozen=True)
class BusyPeriod:
    """A busy interval as returned by the provider (RFC 3339 strings)."""

    start: str
    end: str


def busy_periods_from_response(raw: list[dict[str, Any]]) -> list[BusyPeriod]:
    """Build BusyPeriods from a free/busy payload, dropping incomplete entries."""
    return [
        BusyPeriod(start=item["start"], end=item["end"])
        for item in raw
        if item.get("start") and item.get("end")
    ]


@dataclass
class CalendarEvent:
    """Represents a calendar event to be created."""

    summary: str
    start: datetime
    end: datetime
    time_zone: str
    description: str = ""
    attendees: list[str] = field(default_factory=list)  # email addresses
    conference: bool = True  # request a Meet link


@dataclass
class CreatedEvent:
    event_id: str
    meet_link: Optional[str] = None
    html_link: Optional[str] = None


class CalendarProvider(ABC):
    """Abstract calendar backend.

    Subclasses must implement busy-time queries, event creation,
    and event cancellation.
    """

    @abstractmethod
    async def query_busy_periods(
        self,
        calendar_id: str,
        time_min: datetime,
        time_max: datetime,
        time_zone: str,
    ) -> list[BusyPeriod]:
        """Return the busy periods of a calendar inside a window.

        Args:
            calendar_id: The calendar to query.
            time_min: Beginning of the window.
            time_max: End of the window.
            time_zone: IANA zone the provider should answer in.

        Returns:
            Busy periods in no particular order; entries missing a start
            or end are already dropped.
        """

    @abstractmethod
    async def create_event(
        self, calendar_id: str, event: CalendarEvent
    ) -> CreatedEvent:
        """Create a calendar event.

        Args:
            calendar_id: The calendar to create the event on.
            event: Event details.

        Returns:
            The new event's id and, when available, its Meet and HTML links.
        """

    @abstractmethod
    async def cancel_event(
        self, calendar_id: str, event_id: str
    ) -> None:
        """Cancel / delete a calendar event.

        Args:
            calendar_id: The calendar that owns the event.
            event_id: Provider-specific event identifier.

        Raises:
            EventNotFoundError: if the event does not exist.
        """
