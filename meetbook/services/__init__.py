"""Use cases sitting between the HTTP routes and the calendar provider."""

from .availability import AvailabilityService
from .booking import BookingService
from .relay import LeadRelay

__all__ = ["AvailabilityService", "BookingService", "LeadRelay"]
