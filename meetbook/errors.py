"""Service-level exceptions.

Each carries the HTTP status the API layer answers with; ``app.py``
registers one handler for the whole hierarchy.
"""

from __future__ import annotations


class SchedulerError(Exception):
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidRequestError(SchedulerError):
    """Request passed schema validation but is not usable."""

    status_code = 400


class SlotUnavailableError(SchedulerError):
    status_code = 409


class EventNotFoundError(SchedulerError):
    status_code = 404


class CalendarAuthError(SchedulerError):
    """No usable Google credentials were configured."""

    status_code = 500


class CalendarError(SchedulerError):
    """The calendar provider call failed."""

    status_code = 502


class RelayError(SchedulerError):
    """The outbound-calling API rejected or failed the request."""

    status_code = 502
