"""
Command-line entry point for SyllabusCal.
Reads a syllabus, lists upcoming deadlines, and optionally exports an .ics file and sends reminders.
"""

import argparse
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

import tzlocal
from dateutil import parser as dateutil_parser

from syllabuscal.errors import EmptyExportError, EncodingError, NoInputError
from syllabuscal.event_models import format_local_datetime
from syllabuscal.ics_generator import save_ics
from syllabuscal.logging_helper import Log
from syllabuscal.session import SyllabusSession
from syllabuscal.settings_manager import get_export_dir, get_upcoming_limit


def _parse_now(value: Optional[str]) -> datetime:
    local_zone = tzlocal.get_localzone()
    if not value:
        return datetime.now(local_zone).replace(second=0, microsecond=0)
    now = dateutil_parser.parse(value)
    if now.tzinfo is None:
        now = now.replace(tzinfo=local_zone)
    return now


def _build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Turn syllabus text into calendar events")
    ap.add_argument("file", nargs="?", help="Plain-text syllabus file (reads stdin when omitted)")
    ap.add_argument("--text", help="Syllabus text given inline")
    ap.add_argument("--now", help="Reference date/time for relative dates (default: current local time)")
    ap.add_argument("--limit", type=int, help="Number of upcoming events to list")
    ap.add_argument("--export", nargs="?", const="", metavar="DIR",
                    help="Write syllabus-calendar.ics (to DIR, or the configured export directory)")
    ap.add_argument("--notify", action="store_true", help="Send a reminder for each upcoming event")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)

    Log.section("SyllabusCal")
    Log.info(f"Log file: {Log.get_log_path()}")

    now = _parse_now(args.now)
    session = SyllabusSession(now)

    if args.text is not None:
        session.load_text(args.text, source_name="--text")
    elif args.file:
        session.load_file(Path(args.file))
    elif not sys.stdin.isatty():
        session.load_text(sys.stdin.read(), source_name="stdin")

    try:
        events = session.extract(now)
    except NoInputError as e:
        Log.warn(str(e))
        return 1

    limit = args.limit if args.limit is not None else get_upcoming_limit()
    upcoming = session.upcoming(now, limit)

    print(f"Extracted {len(events)} event(s); {len(upcoming)} upcoming:")
    for event in upcoming:
        print(f"  [{event.category.value}] {event.title} - {format_local_datetime(event.start)}")
    if not upcoming:
        print("  No upcoming events")

    if args.export is not None:
        try:
            result = session.export(stamp=now)
        except EmptyExportError as e:
            Log.warn(str(e))
            return 1
        except EncodingError as e:
            Log.error(f"Export failed: {e}")
            return 1
        directory = Path(args.export) if args.export else get_export_dir()
        ics_path = save_ics(result, directory)
        print(f"Saved {ics_path}")

    if args.notify:
        session.notify_upcoming(now)

    return 0


if __name__ == "__main__":
    sys.exit(main())
