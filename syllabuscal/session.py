"""
Session controller tying extraction, the event collection, export and reminders together.
One session owns one EventCollection and is its only writer.
"""

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from syllabuscal.errors import EncodingError
from syllabuscal.event_models import Event, Reminder
from syllabuscal.event_normalizer import create_manual_event, extract_events
from syllabuscal.event_store import DEFAULT_UPCOMING_LIMIT, EventCollection
from syllabuscal.event_styles import color_function
from syllabuscal.ics_generator import ExportResult, export_calendar
from syllabuscal.logging_helper import Log
from syllabuscal.notifications import notify_upcoming


@dataclass(frozen=True)
class RenderContext:
    """Everything a calendar renderer needs from the session."""
    events: Tuple[Event, ...]
    anchor: datetime
    color_for: Callable[[Event], str]
    on_select_slot: Callable[[Optional[str], datetime, datetime], Optional[Event]]


class SyllabusSession:
    def __init__(self, now: datetime):
        self.text = ""
        self.source_name = ""
        self.store = EventCollection()
        self.anchor = now

    def load_text(self, text: str, source_name: str = ""):
        self.text = text or ""
        self.source_name = source_name

    def load_file(self, path: Path) -> str:
        """Read a plain-text syllabus file into the session."""
        path = Path(path)
        text = path.read_text(encoding="utf-8", errors="replace")
        self.load_text(text, source_name=path.name)
        Log.info(f"Loaded syllabus: {path.name} ({len(text)} characters)")
        return text

    def extract(self, now: datetime, text: Optional[str] = None) -> List[Event]:
        """
        Run extraction and replace the stored events with the result.
        On NoInputError the previous events and anchor are kept.
        """
        if text is not None:
            self.load_text(text)

        events = extract_events(self.text, now)
        self.store.replace_all(events)

        nearest = self.store.nearest_future_start(now)
        if nearest is not None:
            self.anchor = nearest.start
        return events

    def add_event(self, title: Optional[str], start: datetime, end: datetime) -> Optional[Event]:
        """Insertion hook for a selected time span; returns the appended event."""
        event = create_manual_event(title, start, end)
        if event is not None:
            self.store.append(event)
        return event

    def upcoming(self, now: datetime, limit: int = DEFAULT_UPCOMING_LIMIT) -> List[Event]:
        return self.store.upcoming(now, limit)

    def export(self, stamp: datetime) -> ExportResult:
        """
        Encode the stored events.

        Raises:
            EmptyExportError: if there is nothing to export
            EncodingError: if encoding fails
        """
        outcome: List[Tuple[Optional[ExportResult], Optional[EncodingError]]] = []
        export_calendar(self.store.events, stamp, lambda result, error: outcome.append((result, error)))

        result, error = outcome[0]
        if error is not None:
            raise error
        return result

    def notify_upcoming(self, now: datetime) -> List[Reminder]:
        return notify_upcoming(self.store.events, now)

    def render_context(self, now: datetime) -> RenderContext:
        return RenderContext(
            events=self.store.events,
            anchor=self.anchor,
            color_for=color_function(now),
            on_select_slot=self.add_event,
        )
