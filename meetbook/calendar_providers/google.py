"""Google Calendar provider implementation.

Talks to the Calendar API v3. Credentials come from, in order of preference:

  1. an OAuth client id/secret plus a long-lived refresh token
     (works for personal Gmail calendars);
  2. a service account given as e-mail + private key;
  3. a service-account JSON key file.

Options 2 and 3 only see calendars shared with the service account
(Google Workspace).
"""

from __future__ import annotations

import asyncio
import logging
import secrets
import time
from datetime import datetime, timezone
from functools import partial
from typing import Any

import google_auth_httplib2
import httplib2
from google.oauth2 import service_account
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from meetbook.config import Settings
from meetbook.errors import CalendarAuthError, CalendarError, EventNotFoundError

from .base import (
    BusyPeriod,
    CalendarEvent,
    CalendarProvider,
    CreatedEvent,
    busy_periods_from_response,
)

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/calendar"]
TOKEN_URI = "https://oauth2.googleapis.com/token"


def credentials_from_settings(settings: Settings) -> Any:
    """Pick Google credentials from configuration.

    Raises:
        CalendarAuthError: if nothing usable is configured or the key is bad.
    """
    try:
        if settings.has_oauth_credentials:
            logger.info("Using Google OAuth refresh-token credentials")
            return Credentials(
                token=None,
                refresh_token=settings.google_oauth_refresh_token,
                client_id=settings.google_oauth_client_id,
                client_secret=settings.google_oauth_client_secret,
                token_uri=TOKEN_URI,
                scopes=SCOPES,
            )

        if settings.google_service_account_email and settings.google_private_key:
            logger.info(
                "Using Google service account %s",
                settings.google_service_account_email,
            )
            return service_account.Credentials.from_service_account_info(
                {
                    "client_email": settings.google_service_account_email,
                    "private_key": settings.private_key,
                    "token_uri": TOKEN_URI,
                },
                scopes=SCOPES,
            )

        if settings.google_service_account_json:
            logger.info(
                "Using Google service account key file %s",
                settings.google_service_account_json,
            )
            return service_account.Credentials.from_service_account_file(
                settings.google_service_account_json, scopes=SCOPES
            )
    except (ValueError, OSError) as exc:
        logger.exception("Failed to load Google credentials")
        raise CalendarAuthError("Google Calendar authentication failed") from exc

    raise CalendarAuthError("No valid Google authentication credentials found")


class GoogleCalendarProvider(CalendarProvider):
    """CalendarProvider backed by Google Calendar API v3."""

    def __init__(self, credentials: Any) -> None:
        self._credentials = credentials
        self._service = build(
            "calendar", "v3", credentials=self._credentials, cache_discovery=False
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> GoogleCalendarProvider:
        return cls(credentials_from_settings(settings))

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _authorized_http(self) -> google_auth_httplib2.AuthorizedHttp:
        """Fresh authorized transport; httplib2.Http must not be shared across threads."""
        return google_auth_httplib2.AuthorizedHttp(
            self._credentials, http=httplib2.Http()
        )

    def _execute_blocking(self, request: Any) -> Any:
        return request.execute(http=self._authorized_http())

    async def _execute(self, request: Any) -> Any:
        """Run a Google API request in the default thread pool."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            None, partial(self._execute_blocking, request)
        )

    @staticmethod
    def _to_rfc3339(dt: datetime) -> str:
        """Convert a datetime to an RFC 3339 string with timezone."""
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        return dt.isoformat()

    @staticmethod
    def _conference_request_id() -> str:
        return f"meet-{int(time.time() * 1000)}-{secrets.token_hex(5)}"

    @staticmethod
    def _meet_link(event: dict[str, Any]) -> str | None:
        entry_points = event.get("conferenceData", {}).get("entryPoints", [])
        for entry in entry_points:
            if entry.get("entryPointType") == "video":
                return entry.get("uri")
        return None

    # ------------------------------------------------------------------
    # CalendarProvider interface
    # ------------------------------------------------------------------

    async def query_busy_periods(
        self,
        calendar_id: str,
        time_min: datetime,
        time_max: datetime,
        time_zone: str,
    ) -> list[BusyPeriod]:
        """Query the Google freebusy API for one calendar."""
        body = {
            "timeMin": self._to_rfc3339(time_min),
            "timeMax": self._to_rfc3339(time_max),
            "timeZone": time_zone,
            "items": [{"id": calendar_id}],
        }

        try:
            response = await self._execute(
                self._service.freebusy().query(body=body)
            )
        except HttpError as exc:
            logger.exception("Freebusy query failed for calendar %s", calendar_id)
            raise CalendarError("Calendar free/busy query failed") from exc

        raw: list[dict] = (
            response.get("calendars", {})
            .get(calendar_id, {})
            .get("busy", [])
        )
        busy = busy_periods_from_response(raw)
        logger.info(
            "Calendar %s has %d busy period(s) between %s and %s",
            calendar_id,
            len(busy),
            body["timeMin"],
            body["timeMax"],
        )
        return busy

    async def create_event(
        self, calendar_id: str, event: CalendarEvent
    ) -> CreatedEvent:
        """Insert an event into the Google Calendar, with a Meet link if asked."""
        body: dict[str, Any] = {
            "summary": event.summary,
            "start": {
                "dateTime": self._to_rfc3339(event.start),
                "timeZone": event.time_zone,
            },
            "end": {
                "dateTime": self._to_rfc3339(event.end),
                "timeZone": event.time_zone,
            },
        }
        if event.description:
            body["description"] = event.description
        if event.attendees:
            body["attendees"] = [
                {"email": addr, "responseStatus": "needsAction"}
                for addr in event.attendees
            ]
        if event.conference:
            body["conferenceData"] = {
                "createRequest": {
                    "requestId": self._conference_request_id(),
                    "conferenceSolutionKey": {"type": "hangoutsMeet"},
                }
            }

        try:
            result = await self._execute(
                self._service.events()
                .insert(
                    calendarId=calendar_id,
                    body=body,
                    conferenceDataVersion=1,
                )
            )
        except HttpError as exc:
            logger.exception("Failed to create event on calendar %s", calendar_id)
            raise CalendarError("Failed to create event") from exc

        if not result or "id" not in result:
            raise CalendarError("Failed to create event")

        meet_link = self._meet_link(result)
        if event.conference and not meet_link:
            logger.warning("Google Meet link not found in event %s", result["id"])

        logger.info("Created event %s on calendar %s", result["id"], calendar_id)

        return CreatedEvent(
            event_id=result["id"],
            meet_link=meet_link,
            html_link=result.get("htmlLink"),
        )

    async def cancel_event(
        self, calendar_id: str, event_id: str
    ) -> None:
        """Delete an event from Google Calendar."""
        try:
            await self._execute(
                self._service.events()
                .delete(calendarId=calendar_id, eventId=event_id)
            )
        except HttpError as exc:
            if exc.resp.status in (404, 410):
                logger.info(
                    "Event %s not found on calendar %s", event_id, calendar_id
                )
                raise EventNotFoundError("Event not found") from exc
            logger.exception(
                "Failed to cancel event %s on calendar %s",
                event_id,
                calendar_id,
            )
            raise CalendarError("Failed to cancel event") from exc

        logger.info(
            "Cancelled event %s on calendar %s", event_id, calendar_id
        )
