"""Availability engine: slot generation, filtering and ranking."""

from .filters import filter_conflicts, filter_future_slots, has_conflict
from .finder import SlotQuery, find_open_slots
from .ranking import select_earliest, select_nearest
from .slots import generate_day_slots, generate_multi_day_slots
from .timeutils import Interval

__all__ = [
    "Interval",
    "SlotQuery",
    "filter_conflicts",
    "filter_future_slots",
    "find_open_slots",
    "generate_day_slots",
    "generate_multi_day_slots",
    "has_conflict",
    "select_earliest",
    "select_nearest",
]
