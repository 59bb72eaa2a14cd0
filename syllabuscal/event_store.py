"""
In-memory event collection for one session.
Single writer; readers always see either the old or the new full list.
"""

from datetime import datetime
from typing import Iterable, Iterator, List, Optional, Tuple

from syllabuscal.event_models import Event

DEFAULT_UPCOMING_LIMIT = 5


class EventCollection:
    """
    Ordered list of Events. Insertion order is kept as stored;
    chronological views are computed on query.
    """

    def __init__(self, events: Optional[Iterable[Event]] = None):
        self._events: Tuple[Event, ...] = tuple(events or ())

    def replace_all(self, events: Iterable[Event]):
        """Swap the whole collection in one assignment."""
        self._events = tuple(events)

    def append(self, event: Event):
        """Add one event. No duplicate or overlap checks."""
        self._events = self._events + (event,)

    def clear(self):
        self._events = ()

    @property
    def events(self) -> Tuple[Event, ...]:
        return self._events

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[Event]:
        return iter(self._events)

    def chronological(self) -> List[Event]:
        """All events by start time; ties keep insertion order."""
        return sorted(self._events, key=lambda event: event.start)

    def upcoming(self, now: datetime, limit: int = DEFAULT_UPCOMING_LIMIT) -> List[Event]:
        """
        Events starting at or after now, earliest first.

        Args:
            now: Reference instant
            limit: Maximum number of events returned

        Returns:
            At most limit events, sorted by start (stable for equal starts)
        """
        if limit <= 0:
            return []
        future = [event for event in self._events if event.start >= now]
        future.sort(key=lambda event: event.start)
        return future[:limit]

    def nearest_future_start(self, now: datetime) -> Optional[Event]:
        """The earliest event starting at or after now, first inserted on ties."""
        nearest = None
        for event in self._events:
            if event.start >= now and (nearest is None or event.start < nearest.start):
                nearest = event
        return nearest
