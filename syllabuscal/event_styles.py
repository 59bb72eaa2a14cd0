"""
Color tokens for calendar renderers.
"""

from datetime import datetime
from typing import Callable

from syllabuscal.event_models import Event, EventCategory
from syllabuscal.reminders import is_imminent

CATEGORY_COLORS = {
    EventCategory.EXAM: "#ef4444",
    EventCategory.PROJECT: "#10b981",
    EventCategory.ASSIGNMENT: "#3b82f6",
}
IMMINENT_COLOR = "#facc15"

# Lighter shades for the upcoming-events list
PANEL_COLORS = {
    EventCategory.EXAM: "#fee2e2",
    EventCategory.PROJECT: "#d1fae5",
    EventCategory.ASSIGNMENT: "#dbeafe",
}


def event_color(event: Event, now: datetime) -> str:
    """Category color, overridden when the event is imminent. Never changes the category."""
    if is_imminent(event, now):
        return IMMINENT_COLOR
    return CATEGORY_COLORS.get(event.category, CATEGORY_COLORS[EventCategory.ASSIGNMENT])


def panel_color(event: Event) -> str:
    return PANEL_COLORS.get(event.category, PANEL_COLORS[EventCategory.ASSIGNMENT])


def color_function(now: datetime) -> Callable[[Event], str]:
    """event_color bound to a fixed now, for renderers that call back per event."""
    def _color(event: Event) -> str:
        return event_color(event, now)
    return _color
