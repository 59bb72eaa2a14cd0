from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

import pytest
from icalendar import Calendar

from syllabuscal.errors import EmptyExportError, EncodingError
from syllabuscal.event_models import Event, EventCategory
from syllabuscal.ics_generator import ICS_FILENAME, encode_events, export_calendar, save_ics

TZ = ZoneInfo("America/Phoenix")
STAMP = datetime(2026, 1, 5, 9, 0, tzinfo=TZ)


def _events():
    start = datetime(2026, 10, 15, 14, 0, tzinfo=TZ)
    return [
        Event(title="10/15 at 2pm", start=start, end=start + timedelta(hours=1),
              category=EventCategory.EXAM, description="Midterm exam on 10/15 at 2pm"),
        Event(title="11/01", start=datetime(2026, 11, 1, 12, 0, tzinfo=TZ),
              end=datetime(2026, 11, 1, 13, 0, tzinfo=TZ), category=EventCategory.PROJECT),
        Event(title="Essay, part 1; draft", start=datetime(2026, 12, 1, 9, 5, tzinfo=TZ),
              end=datetime(2026, 12, 1, 10, 5, tzinfo=TZ)),
    ]


def test_encoding_is_byte_identical_for_same_input():
    assert encode_events(_events(), STAMP) == encode_events(_events(), STAMP)


def test_each_event_becomes_one_vevent_with_matching_summary():
    events = _events()

    calendar = Calendar.from_ical(encode_events(events, STAMP))
    vevents = calendar.walk("VEVENT")

    assert len(vevents) == len(events)
    assert [str(v.get("SUMMARY")) for v in vevents] == [e.title for e in events]
    for vevent in vevents:
        assert str(vevent.get("STATUS")) == "CONFIRMED"
        assert str(vevent.get("X-MICROSOFT-CDO-BUSYSTATUS")) == "BUSY"


def test_start_and_end_use_wall_clock_fields():
    vevent = Calendar.from_ical(encode_events(_events(), STAMP)).walk("VEVENT")[0]

    assert vevent.decoded("DTSTART") == datetime(2026, 10, 15, 14, 0)
    assert vevent.decoded("DTEND") == datetime(2026, 10, 15, 15, 0)


def test_output_has_crlf_lines_within_75_octets():
    long_title = ("Final project report " * 10).strip()
    event = Event(title=long_title, start=STAMP, end=STAMP + timedelta(hours=1))

    data = encode_events([event], STAMP)
    lines = data.split(b"\r\n")

    assert data.endswith(b"END:VCALENDAR\r\n")
    assert all(len(line) <= 75 for line in lines)
    assert str(Calendar.from_ical(data).walk("VEVENT")[0].get("SUMMARY")) == long_title


def test_calendar_header_names_event_timezone():
    data = encode_events(_events(), STAMP)

    assert b"X-WR-TIMEZONE:America/Phoenix\r\n" in data
    assert b"DTSTART:20261015T140000\r\n" in data
    assert b"DTSTAMP:20260105T160000Z\r\n" in data


def test_empty_collection_raises_empty_export_error():
    with pytest.raises(EmptyExportError):
        encode_events([], STAMP)

    assert issubclass(EmptyExportError, EncodingError)


def test_event_ending_before_start_is_rejected():
    bad = Event(title="Backwards", start=STAMP, end=STAMP - timedelta(minutes=1))

    with pytest.raises(EncodingError, match="ends before it starts"):
        encode_events(_events() + [bad], STAMP)


def test_export_calendar_reports_success_once():
    calls = []

    export_calendar(_events(), STAMP, lambda result, error: calls.append((result, error)))

    assert len(calls) == 1
    result, error = calls[0]
    assert error is None
    assert result.filename == ICS_FILENAME == "syllabus-calendar.ics"
    assert result.event_count == 3
    assert result.data == encode_events(_events(), STAMP)


def test_export_calendar_reports_failure_once(capsys):
    calls = []

    export_calendar([], STAMP, lambda result, error: calls.append((result, error)))

    assert len(calls) == 1
    assert calls[0][0] is None
    assert isinstance(calls[0][1], EmptyExportError)
    assert "No events to export!" in capsys.readouterr().out


def test_save_ics_writes_suggested_file(tmp_path):
    calls = []
    export_calendar(_events(), STAMP, lambda result, error: calls.append(result))

    path = save_ics(calls[0], tmp_path / "exports")

    assert path == tmp_path / "exports" / ICS_FILENAME
    assert path.read_bytes() == calls[0].data
