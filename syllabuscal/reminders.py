"""
Reminder decisions for events.
Pure functions of (event, now): nothing is recorded, so callers that want
at-most-once delivery must track what they already sent.
"""

from datetime import datetime, timedelta
from typing import List, Optional, Sequence

from syllabuscal.event_models import Event, Reminder, format_local_datetime

IMMINENT_WINDOW = timedelta(hours=24)


def is_future(event: Event, now: datetime) -> bool:
    return event.start >= now


def is_imminent(event: Event, now: datetime) -> bool:
    """True when the event has not started and starts within IMMINENT_WINDOW."""
    return is_future(event, now) and event.start - now < IMMINENT_WINDOW


def reminder_for(event: Event, now: datetime) -> Optional[Reminder]:
    """
    Decide the notification for an event.

    Returns:
        Reminder if the event is still ahead of now, else None
    """
    if not is_future(event, now):
        return None
    return Reminder(
        title=f"Upcoming: {event.title}",
        body=f"Starts at {format_local_datetime(event.start)}",
    )


def reminders_for(events: Sequence[Event], now: datetime) -> List[Reminder]:
    reminders = []
    for event in events:
        reminder = reminder_for(event, now)
        if reminder is not None:
            reminders.append(reminder)
    return reminders
