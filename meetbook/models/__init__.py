"""Data models for the HTTP layer."""

from .requests import (
    AvailabilityRequest,
    BookingRequest,
    CancelRequest,
    LeadWebhook,
    SuggestRequest,
)
from .responses import (
    AvailabilityResponse,
    BookingResponse,
    CancelResponse,
    SlotOut,
    SuggestionOut,
    SuggestResponse,
    WebhookResponse,
)

__all__ = [
    "AvailabilityRequest",
    "AvailabilityResponse",
    "BookingRequest",
    "BookingResponse",
    "CancelRequest",
    "CancelResponse",
    "LeadWebhook",
    "SlotOut",
    "SuggestRequest",
    "SuggestResponse",
    "SuggestionOut",
    "WebhookResponse",
]
