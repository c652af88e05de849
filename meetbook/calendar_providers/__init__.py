"""Calendar provider abstractions and implementations."""

from .base import BusyPeriod, CalendarEvent, CalendarProvider, CreatedEvent

__all__ = ["BusyPeriod", "CalendarProvider", "CalendarEvent", "CreatedEvent"]
