from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from syllabuscal.errors import EmptyExportError, NoInputError
from syllabuscal.event_models import EventCategory
from syllabuscal.session import SyllabusSession

TZ = ZoneInfo("America/Phoenix")
NOW = datetime(2026, 1, 5, 9, 0, tzinfo=TZ)

SYLLABUS = """CS 101 Schedule
Homework 1 due 1/2
Homework 2 due 1/20 at 11:59pm
Midterm exam on 2/10 at 2pm
Project proposal due 3/1
"""


def test_extract_replaces_events_and_moves_anchor():
    session = SyllabusSession(NOW)

    events = session.extract(NOW, SYLLABUS)

    assert [e.category for e in events] == [
        EventCategory.ASSIGNMENT,
        EventCategory.ASSIGNMENT,
        EventCategory.EXAM,
        EventCategory.PROJECT,
    ]
    # 1/2 is already past, so it rolls to next year and the anchor is 1/20
    assert events[0].start == datetime(2027, 1, 2, 12, 0, tzinfo=TZ)
    assert session.anchor == datetime(2026, 1, 20, 23, 59, tzinfo=TZ)
    assert len(session.store) == 4


def test_rerunning_extraction_replaces_previous_set():
    session = SyllabusSession(NOW)
    session.extract(NOW, SYLLABUS)

    session.extract(NOW, "Final exam 5/1")

    assert [e.title for e in session.store] == ["5/1"]


def test_missing_text_leaves_prior_state_untouched():
    session = SyllabusSession(NOW)
    session.extract(NOW, SYLLABUS)
    before = session.store.events
    anchor = session.anchor

    with pytest.raises(NoInputError):
        session.extract(NOW, "")

    assert session.store.events == before
    assert session.anchor == anchor


def test_anchor_kept_when_no_future_events():
    session = SyllabusSession(NOW)

    session.extract(NOW, "Old deadline 3/1/2020")

    assert session.anchor == NOW


def test_insertion_hook_appends_manual_event():
    session = SyllabusSession(NOW)
    session.extract(NOW, SYLLABUS)
    context = session.render_context(NOW)
    start = NOW + timedelta(days=1)

    added = context.on_select_slot("Study group", start, start + timedelta(hours=2))
    cancelled = context.on_select_slot("", start, start + timedelta(hours=2))

    assert added.title == "Study group"
    assert cancelled is None
    assert session.store.events[-1] == added
    assert len(session.store) == 5


def test_render_context_exposes_colors_and_events():
    session = SyllabusSession(NOW)
    session.extract(NOW, "Quiz tomorrow at 8am; Midterm 2/10")

    context = session.render_context(NOW)

    assert context.anchor == datetime(2026, 1, 6, 8, 0, tzinfo=TZ)
    assert [context.color_for(e) for e in context.events] == ["#facc15", "#ef4444"]


def test_upcoming_limits_results():
    session = SyllabusSession(NOW)
    session.extract(NOW, SYLLABUS)

    assert [e.title for e in session.upcoming(NOW, 2)] == ["1/20 at 11:59pm", "2/10 at 2pm"]


def test_export_round_trip_and_empty_failure():
    session = SyllabusSession(NOW)
    with pytest.raises(EmptyExportError):
        session.export(stamp=NOW)

    session.extract(NOW, SYLLABUS)
    result = session.export(stamp=NOW)

    assert result.data.count(b"BEGIN:VEVENT") == 4
    assert result.filename == "syllabus-calendar.ics"


def test_load_file_reads_text(tmp_path):
    path = tmp_path / "syllabus.txt"
    path.write_text(SYLLABUS, encoding="utf-8")
    session = SyllabusSession(NOW)

    session.load_file(path)

    assert session.source_name == "syllabus.txt"
    assert len(session.extract(NOW)) == 4


def test_notify_upcoming_without_delivery_backend(monkeypatch):
    monkeypatch.setattr("syllabuscal.notifications.RUMPS_AVAILABLE", False)
    session = SyllabusSession(NOW)
    session.extract(NOW, SYLLABUS)

    reminders = session.notify_upcoming(NOW)

    assert len(reminders) == 4
    assert reminders[2].title == "Upcoming: 2/10 at 2pm"
