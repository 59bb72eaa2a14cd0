"""
Event data models for syllabus event extraction.
Defines TemporalMatch (from the locator), EventCategory, Event and Reminder.
"""

import dataclasses
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class EventCategory(Enum):
    """Kind of deadline an event represents."""
    EXAM = "exam"
    PROJECT = "project"
    ASSIGNMENT = "assignment"


@dataclass(frozen=True)
class TemporalMatch:
    """
    One date/time expression found in syllabus text.
    This is the raw locator output, before classification.
    """
    matched_text: str
    instant: datetime
    start: int = 0        # offset of the match in the source text
    end: int = 0
    context: str = ""     # clause surrounding the match, used for classification


@dataclass(frozen=True)
class Event:
    """
    Normalized calendar event.
    Ready for display, reminders and ICS export.
    """
    title: str
    start: datetime
    end: datetime
    category: EventCategory = EventCategory.ASSIGNMENT
    description: Optional[str] = None

    def duration_minutes(self) -> int:
        """Get event duration in minutes."""
        delta = self.end - self.start
        return int(delta.total_seconds() / 60)

    def is_well_formed(self) -> bool:
        """True when the event does not end before it starts."""
        return self.end >= self.start

    def replace(self, **changes) -> "Event":
        """Return an edited copy; events are never mutated in place."""
        return dataclasses.replace(self, **changes)


@dataclass(frozen=True)
class Reminder:
    """Notification content handed to the delivery layer."""
    title: str
    body: str


def format_local_datetime(dt: datetime) -> str:
    """
    Render a datetime the way en-US locale strings look,
    e.g. '10/15/2026, 2:00:00 PM'.
    """
    hour = dt.hour % 12 or 12
    meridiem = "AM" if dt.hour < 12 else "PM"
    return f"{dt.month}/{dt.day}/{dt.year}, {hour}:{dt.minute:02d}:{dt.second:02d} {meridiem}"
