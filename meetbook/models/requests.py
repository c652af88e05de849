"""Pydantic models for incoming API request bodies.

Field names are snake_case; the wire format is the camelCase the calling
agent sends (``durationMin``, ``workHours`` ...). Defaults that depend on
deployment (time zone, calendar id, booking title) are left as ``None`` and
filled from :class:`meetbook.config.Settings` by the services.
"""

from __future__ import annotations

from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from meetbook.availability.timeutils import get_zone

Hour = Annotated[int, Field(ge=0, le=23)]


class _ApiModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class _ZonedRequest(_ApiModel):
    calendar_id: Optional[str] = Field(default=None, alias="calendarId")
    tz: Optional[str] = None

    @field_validator("tz")
    @classmethod
    def _known_zone(cls, value: Optional[str]) -> Optional[str]:
        if value is not None:
            get_zone(value)
        return value


class SlotWindow(_ZonedRequest):
    days: int = Field(default=7, ge=1, le=30)
    duration_min: int = Field(default=45, ge=15, le=480, alias="durationMin")
    work_hours: tuple[Hour, Hour] = Field(default=(9, 18), alias="workHours")
    buffer_min: int = Field(default=10, ge=0, le=60, alias="bufferMin")


class AvailabilityRequest(SlotWindow):
    """Ask for the next open slots."""


class SuggestRequest(SlotWindow):
    """Ask for open slots near a time the caller wanted but could not get."""

    requested_start_iso: str = Field(alias="requestedStartISO")
    requested_end_iso: str = Field(alias="requestedEndISO")
    max_suggestions: int = Field(default=5, ge=1, le=10, alias="maxSuggestions")


class BookingRequest(_ZonedRequest):
    """Book a meeting starting at ``startISO``."""

    start_iso: str = Field(alias="startISO")
    attendee_email: Optional[EmailStr] = Field(default=None, alias="attendeeEmail")
    title: Optional[str] = None
    description: Optional[str] = None
    recheck: bool = True


class CancelRequest(_ApiModel):
    event_id: str = Field(min_length=1, alias="eventId")
    calendar_id: Optional[str] = Field(default=None, alias="calendarId")


class LeadWebhook(BaseModel):
    """Inbound lead pushed by the form automation (snake_case on the wire)."""

    phone_number: str
    lead_name: str
    lead_email: str
    preferred_datetime_raw: Optional[str] = None
    lead_phone: Optional[str] = None
    lead_message: Optional[str] = None
