"""
Event normalizer for converting TemporalMatch results to Events.
Runs the locate -> classify -> build pipeline and handles manually created events.
"""

from datetime import datetime, timedelta
from typing import List, Optional

from syllabuscal.errors import NoInputError
from syllabuscal.event_classifier import classify
from syllabuscal.event_models import Event, EventCategory, TemporalMatch
from syllabuscal.logging_helper import Log
from syllabuscal.temporal_locator import locate

DEFAULT_DURATION = timedelta(minutes=60)


def build_event(match: TemporalMatch, category: EventCategory) -> Event:
    """
    Build an Event from a located expression and its category.
    The event lasts DEFAULT_DURATION; the title may be empty.
    """
    title = (match.matched_text or "").strip()
    context = (match.context or "").strip()
    return Event(
        title=title,
        start=match.instant,
        end=match.instant + DEFAULT_DURATION,
        category=category,
        description=context if context and context != title else None,
    )


def extract_events(text: Optional[str], now: datetime) -> List[Event]:
    """
    Extract every dated event from syllabus text.

    Args:
        text: Raw syllabus text
        now: Reference instant used to resolve relative and year-less dates

    Returns:
        Fully built list of Events in source order (empty if no dates were found)

    Raises:
        NoInputError: if text is empty or missing
    """
    Log.section("Event Extraction")

    if not text:
        Log.warn("No syllabus text provided - extraction aborted")
        Log.kv({"stage": "extract", "result": "failed", "reason": "no_input"})
        raise NoInputError()

    Log.info(f"Scanning {len(text)} characters relative to {now.isoformat()}")

    events = [build_event(match, classify(match.context or match.matched_text))
              for match in locate(text, now)]

    counts = {category.value: 0 for category in EventCategory}
    for event in events:
        counts[event.category.value] += 1

    Log.info(f"Extracted {len(events)} event(s)")
    Log.kv({"stage": "extract", "result": "success", "events": len(events), **counts})
    return events


def create_manual_event(title: Optional[str], start: datetime, end: datetime) -> Optional[Event]:
    """
    Create a user-entered event for a selected time span.

    An empty title cancels creation. A span that ends before it starts is
    clamped to DEFAULT_DURATION.

    Returns:
        The new Assignment event, or None if creation was cancelled
    """
    if not title:
        Log.info("Manual event cancelled (no title)")
        return None

    if end < start:
        Log.warn(f"Manual event '{title}' ends before it starts - clamping to {DEFAULT_DURATION}")
        Log.kv({"stage": "manual", "action": "clamped", "start": start.isoformat(), "end": end.isoformat()})
        end = start + DEFAULT_DURATION

    event = Event(title=title, start=start, end=end, category=EventCategory.ASSIGNMENT)
    Log.kv({"stage": "manual", "result": "created", "title": title, "duration_min": event.duration_minutes()})
    return event
