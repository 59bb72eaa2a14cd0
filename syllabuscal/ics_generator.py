"""
ICS Generator for creating iCalendar (.ics) files.
Encodes the event collection as RFC5545 bytes, one VEVENT per event.
"""

import hashlib
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional, Sequence, Tuple

import tzlocal
from dateutil import tz as dateutil_tz

from syllabuscal.errors import EmptyExportError, EncodingError
from syllabuscal.event_models import Event
from syllabuscal.logging_helper import Log

ICS_FILENAME = "syllabus-calendar.ics"
ICS_MIME_TYPE = "text/calendar;charset=utf-8"
PRODID = "-//SyllabusCal//SyllabusCal//EN"
MAX_LINE_OCTETS = 75


@dataclass(frozen=True)
class ExportResult:
    """Encoded calendar plus the file name it should be saved under."""
    data: bytes
    filename: str = ICS_FILENAME
    event_count: int = 0


ExportCallback = Callable[[Optional[ExportResult], Optional[EncodingError]], None]


def _escape_ical_text(text: str) -> str:
    """
    Escape text for iCalendar format (RFC5545).
    Escapes commas, semicolons, backslashes, and newlines.

    Args:
        text: Text to escape

    Returns:
        Escaped text safe for iCalendar
    """
    if text is None:
        return ""

    # Replace backslashes first (before other replacements)
    text = text.replace('\\', '\\\\')
    text = text.replace(';', '\\;')
    text = text.replace(',', '\\,')
    text = text.replace('\r\n', '\n').replace('\r', '\n')
    text = text.replace('\n', '\\n')
    return text


def _fold_line(line: str) -> str:
    """
    Fold a content line to 75 octets; continuation lines start with a space.
    """
    lines = []
    current_line = ""

    for char in line:
        test_line = current_line + char
        if len(test_line.encode('utf-8')) <= MAX_LINE_OCTETS:
            current_line = test_line
        else:
            lines.append(current_line)
            current_line = " " + char

    lines.append(current_line)
    return '\r\n'.join(lines)


def _datetime_tuple(dt: datetime) -> Tuple[int, int, int, int, int]:
    """(year, month, day, hour, minute) of the wall-clock time."""
    return (dt.year, dt.month, dt.day, dt.hour, dt.minute)


def _format_ical_tuple(parts: Tuple[int, int, int, int, int]) -> str:
    """Format a date tuple as a floating iCalendar date-time (YYYYMMDDTHHMM00)."""
    year, month, day, hour, minute = parts
    return f"{year:04d}{month:02d}{day:02d}T{hour:02d}{minute:02d}00"


def _format_ical_datetime(dt: datetime) -> str:
    """
    Format datetime to iCalendar format (UTC).
    Converts from system timezone to UTC if needed.

    Args:
        dt: datetime object (in system timezone or UTC)

    Returns:
        Formatted datetime string (YYYYMMDDTHHMMSSZ)
    """
    if dt.tzinfo is None:
        # If no timezone, assume it's local time (system timezone)
        dt = dt.replace(tzinfo=dateutil_tz.tzlocal())

    dt_utc = dt.astimezone(dateutil_tz.tzutc())
    return dt_utc.strftime('%Y%m%dT%H%M%SZ')


def _tzinfo_to_iana(tzinfo) -> Optional[str]:
    """
    Attempt to extract an IANA timezone identifier from a tzinfo object.
    """
    if tzinfo is None:
        return None

    for attr in ("key", "zone"):
        value = getattr(tzinfo, attr, None)
        if isinstance(value, str) and value:
            if "/" in value or value.upper() == "UTC":
                return value
    return None


def _resolve_iana_timezone(events: Sequence[Event]) -> Optional[str]:
    """
    IANA zone for X-WR-TIMEZONE: taken from the events when they carry one,
    else from the system via tzlocal.
    """
    for event in events:
        iana = _tzinfo_to_iana(event.start.tzinfo)
        if iana:
            return iana

    try:
        iana = tzlocal.get_localzone_name()
    except Exception as tz_err:
        Log.warn(f"Failed to determine system IANA timezone: {tz_err}")
        return None
    return iana or None


def _event_uid(index: int, event: Event) -> str:
    uid_string = f"{index}_{event.title}_{event.start.isoformat()}"
    return hashlib.md5(uid_string.encode('utf-8')).hexdigest() + "@syllabuscal.local"


def _event_lines(index: int, event: Event, dtstamp: str) -> list:
    if not isinstance(event.title, str):
        raise EncodingError(f"Event {index} has a non-text title: {event.title!r}")
    if not event.is_well_formed():
        raise EncodingError(
            f"Event {index} '{event.title}' ends before it starts "
            f"({event.start.isoformat()} > {event.end.isoformat()})"
        )

    lines = [
        "BEGIN:VEVENT",
        f"UID:{_event_uid(index, event)}",
        f"DTSTAMP:{dtstamp}",
        f"DTSTART:{_format_ical_tuple(_datetime_tuple(event.start))}",
        f"DTEND:{_format_ical_tuple(_datetime_tuple(event.end))}",
        f"SUMMARY:{_escape_ical_text(event.title)}",
    ]
    if event.description:
        lines.append(f"DESCRIPTION:{_escape_ical_text(event.description)}")
    lines.append(f"CATEGORIES:{event.category.value.upper()}")
    lines.append("STATUS:CONFIRMED")
    lines.append("X-MICROSOFT-CDO-BUSYSTATUS:BUSY")
    lines.append("END:VEVENT")
    return lines


def encode_events(events: Sequence[Event], stamp: datetime) -> bytes:
    """
    Encode events as an iCalendar byte stream.

    Args:
        events: Events to export, in collection order
        stamp: Instant written as DTSTAMP; identical inputs give identical bytes

    Returns:
        UTF-8 encoded calendar

    Raises:
        EmptyExportError: if there are no events
        EncodingError: if an event cannot be serialized
    """
    if not events:
        raise EmptyExportError()

    try:
        dtstamp = _format_ical_datetime(stamp)
        ics_lines = [
            "BEGIN:VCALENDAR",
            "VERSION:2.0",
            f"PRODID:{PRODID}",
            "CALSCALE:GREGORIAN",
            "METHOD:PUBLISH",
        ]
        iana_timezone = _resolve_iana_timezone(events)
        if iana_timezone:
            ics_lines.append(f"X-WR-TIMEZONE:{iana_timezone}")

        for index, event in enumerate(events):
            ics_lines.extend(_event_lines(index, event, dtstamp))

        ics_lines.append("END:VCALENDAR")
        ics_content = '\r\n'.join(_fold_line(line) for line in ics_lines) + '\r\n'
        return ics_content.encode('utf-8')
    except EncodingError:
        raise
    except (AttributeError, TypeError, ValueError, OverflowError) as e:
        raise EncodingError(f"Cannot encode events: {e}") from e


def export_calendar(events: Sequence[Event], stamp: datetime, on_complete: ExportCallback):
    """
    Encode events and report the outcome through on_complete exactly once.
    on_complete receives (result, None) on success or (None, error) on failure.
    """
    Log.section("ICS Generator")
    Log.info(f"Encoding {len(events)} event(s)")

    try:
        data = encode_events(events, stamp)
    except EmptyExportError as e:
        Log.warn(str(e))
        Log.kv({"stage": "ics", "result": "failed", "reason": "empty"})
        on_complete(None, e)
        return
    except EncodingError as e:
        Log.error(f"ICS generation failed: {e}")
        Log.kv({"stage": "ics", "result": "failed", "error": str(e)})
        on_complete(None, e)
        return

    result = ExportResult(data=data, filename=ICS_FILENAME, event_count=len(events))
    Log.kv({"stage": "ics", "result": "success", "events": len(events), "bytes": len(data)})
    on_complete(result, None)


def save_ics(result: ExportResult, directory: Path) -> Path:
    """
    Write an export result into directory under its suggested file name.

    Returns:
        Path of the written file
    """
    directory = Path(directory).expanduser()
    directory.mkdir(parents=True, exist_ok=True)
    ics_path = directory / result.filename
    ics_path.write_bytes(result.data)

    Log.info(f"ICS file generated: {ics_path}")
    Log.kv({"stage": "ics", "action": "saved", "ics_path": str(ics_path), "events": result.event_count})
    return ics_path
