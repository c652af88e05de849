"""Pydantic models for API responses."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class _ApiModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class SlotOut(_ApiModel):
    start: str
    end: str


class SuggestionOut(SlotOut):
    duration: int


class RequestedTime(_ApiModel):
    start: str
    end: str


class AvailabilityResponse(_ApiModel):
    time_zone: str = Field(alias="timeZone")
    slots: list[SlotOut]


class SuggestResponse(_ApiModel):
    requested_time: RequestedTime = Field(alias="requestedTime")
    time_zone: str = Field(alias="timeZone")
    suggestions: list[SuggestionOut]
    total_available: int = Field(alias="totalAvailable")


class BookingResponse(_ApiModel):
    event_id: str = Field(alias="eventId")
    meet_link: Optional[str] = Field(default=None, alias="meetLink")
    html_link: Optional[str] = Field(default=None, alias="htmlLink")


class CancelResponse(_ApiModel):
    ok: bool = True


class WebhookResponse(_ApiModel):
    success: bool = True
    message: str
    data: dict[str, Any]
    bland_ai: Any = Field(alias="blandAI")
