"""
Temporal expression locator for syllabus text.
Finds date/time expressions in free text and resolves them against an explicit "now".

Numeric dates follow the US month/day convention: "12/10" is December 10.
Dates without a year resolve to their nearest occurrence on or after now's date.
Dates without a time of day resolve to 12:00 ("tonight" resolves to 22:00).
"""

import re
from datetime import datetime, timedelta
from typing import Iterator, Optional

from dateutil import parser as dateutil_parser
from dateutil.relativedelta import relativedelta, MO, TU, WE, TH, FR, SA, SU

from syllabuscal.event_models import TemporalMatch

DEFAULT_HOUR = 12
TONIGHT_HOUR = 22

_WEEKDAYS = {
    "monday": MO,
    "tuesday": TU,
    "wednesday": WE,
    "thursday": TH,
    "friday": FR,
    "saturday": SA,
    "sunday": SU,
}

_SP = r"[ \t]+"
_OSP = r"[ \t]*"
_MONTH = (
    r"(?:jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?"
    r"|aug(?:ust)?|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?)\.?"
)
_WEEKDAY_FULL = r"(?:monday|tuesday|wednesday|thursday|friday|saturday|sunday)"
_WEEKDAY_ABBR = r"(?:mon|tues?|wed|thu(?:rs?)?|fri|sat|sun)\.?"
_WEEKDAY_PREFIX = rf"(?:(?:{_WEEKDAY_FULL}|{_WEEKDAY_ABBR}),?{_SP})"
_DAY = r"\d{1,2}(?!\d)(?:st|nd|rd|th)?"
_YEAR = rf"(?:,?{_SP}\d{{4}}(?!\d))"
_TIME = (
    r"(?:\d{1,2}(?::\d{2})?" + _OSP + r"(?:a\.m\.|p\.m\.|am|pm)"
    r"|\d{1,2}:\d{2}|noon|midnight)"
)

_DATE_ALTERNATIVES = "|".join([
    r"(?P<iso>\d{4}-\d{1,2}-\d{1,2})",
    rf"(?P<numeric>{_WEEKDAY_PREFIX}?(?:\d{{1,2}}/\d{{1,2}}(?:/(?:\d{{4}}|\d{{2}}))?|\d{{1,2}}-\d{{1,2}}-\d{{4}}))(?![\d/])",
    rf"(?P<month_day>{_WEEKDAY_PREFIX}?{_MONTH}{_OSP}{_DAY}{_YEAR}?)",
    rf"(?P<day_month>{_WEEKDAY_PREFIX}?{_DAY}{_SP}(?:of{_SP})?{_MONTH}{_YEAR}?)",
    r"(?P<relative>today|tonight|tomorrow)",
    rf"(?P<weekday>(?:(?:this|next){_SP})?{_WEEKDAY_FULL})",
    rf"(?P<offset>in{_SP}(?:\d{{1,3}}|an?){_SP}(?:days?|weeks?))",
])

_EXPRESSION_RE = re.compile(
    rf"(?<![\w/])"
    rf"(?P<time_pre>{_TIME}{_SP}(?:on{_SP})?)?"
    rf"(?:{_DATE_ALTERNATIVES})"
    rf"(?P<time_post>{_OSP}(?:,|@|(?:at|by|from)\b)?{_OSP}{_TIME})?"
    rf"(?!\w)",
    re.IGNORECASE,
)

_TIME_RE = re.compile(_TIME, re.IGNORECASE)
_WEEKDAY_PREFIX_RE = re.compile(rf"^{_WEEKDAY_PREFIX}", re.IGNORECASE)
_ORDINAL_RE = re.compile(r"(?<=\d)(?:st|nd|rd|th)\b", re.IGNORECASE)
_CLAUSE_BOUNDARY_RE = re.compile(r"[\n;|!?]|\.(?=[ \t]+[A-Z])")
# After a match, list separators also end the clause ("due 2/3, Midterm 2/10")
_CLAUSE_END_RE = re.compile(r"[\n;|!?,]|\.(?=[ \t]+[A-Z])|\b(?i:and)\b")
_LEADING_JOINER_RE = re.compile(r"^[\s,]*(?:and\b)?[\s,]*", re.IGNORECASE)

_CALENDAR_KINDS = ("iso", "numeric", "month_day", "day_month")
MAX_YEAR_LOOKAHEAD = 8


def locate(text: Optional[str], now: datetime) -> Iterator[TemporalMatch]:
    """
    Yield every resolvable date/time expression in text, in source order.

    Args:
        text: Syllabus text
        now: Reference instant for relative and year-less expressions

    Returns:
        Generator of TemporalMatch; expressions that cannot be resolved are skipped
    """
    if not text:
        return

    found = _EXPRESSION_RE.finditer(text)
    previous_end = 0
    current = next(found, None)
    while current is not None:
        following = next(found, None)
        next_start = following.start() if following is not None else len(text)

        instant = _resolve(current, now)
        if instant is not None:
            yield TemporalMatch(
                matched_text=current.group(0).strip(),
                instant=instant,
                start=current.start(),
                end=current.end(),
                context=_clause_around(text, current, previous_end, next_start),
            )

        previous_end = current.end()
        current = following


def _clause_around(text: str, match: re.Match, lower: int, upper: int) -> str:
    """Clause containing the match, bounded by punctuation and neighbouring matches."""
    left = lower
    for boundary in _CLAUSE_BOUNDARY_RE.finditer(text, lower, match.start()):
        left = boundary.end()

    right = upper
    boundary = _CLAUSE_END_RE.search(text, match.end(), upper)
    if boundary is not None:
        right = boundary.start()

    return _LEADING_JOINER_RE.sub("", text[left:right], count=1).strip()


def _resolve(match: re.Match, now: datetime) -> Optional[datetime]:
    base = now.replace(hour=0, minute=0, second=0, microsecond=0)
    default_hour = DEFAULT_HOUR

    try:
        kind = next((k for k in _CALENDAR_KINDS if match.group(k)), None)
        if kind is not None:
            day = _resolve_calendar_date(kind, match.group(kind), base, now)
        elif match.group("relative"):
            word = match.group("relative").lower()
            day = base + timedelta(days=1) if word == "tomorrow" else base
            if word == "tonight":
                default_hour = TONIGHT_HOUR
        elif match.group("weekday"):
            day = _resolve_weekday(match.group("weekday"), base)
        else:
            day = _resolve_offset(match.group("offset"), base)

        time_text = match.group("time_pre") or match.group("time_post")
        if time_text:
            instant = _apply_time(day, time_text)
        else:
            instant = day.replace(hour=default_hour)
    except (ValueError, OverflowError):
        return None

    return instant.replace(second=0, microsecond=0)


def _resolve_calendar_date(kind: str, date_text: str, base: datetime, now: datetime) -> datetime:
    cleaned = _WEEKDAY_PREFIX_RE.sub("", date_text.strip(), count=1)
    cleaned = _ORDINAL_RE.sub("", cleaned)
    cleaned = re.sub(r"(?<=[A-Za-z])\.", "", cleaned)
    cleaned = re.sub(r"\bof\b", " ", cleaned, flags=re.IGNORECASE)

    if kind == "iso":
        has_year = True
    elif kind == "numeric":
        has_year = cleaned.count("/") == 2 or "-" in cleaned
    else:
        has_year = re.search(r"\d{4}", cleaned) is not None

    if has_year:
        return dateutil_parser.parse(cleaned, default=base, dayfirst=False)

    # First year in which the date exists and is not before today (2/29 waits for a leap year)
    for year in range(now.year, now.year + MAX_YEAR_LOOKAHEAD + 1):
        try:
            day = dateutil_parser.parse(cleaned, default=base.replace(year=year, month=1, day=1), dayfirst=False)
        except ValueError:
            continue
        if day.date() >= now.date():
            return day
    raise ValueError(f"No plausible year for '{date_text}'")


def _resolve_weekday(phrase: str, base: datetime) -> datetime:
    words = phrase.lower().split()
    weekday = _WEEKDAYS[words[-1]]
    day = base + relativedelta(weekday=weekday(+1))
    if words[0] == "next":
        day += timedelta(days=7)
    return day


def _resolve_offset(phrase: str, base: datetime) -> datetime:
    _, amount, unit = phrase.lower().split()
    count = 1 if amount in ("a", "an") else int(amount)
    if unit.startswith("week"):
        return base + relativedelta(weeks=count)
    return base + relativedelta(days=count)


def _apply_time(day: datetime, time_text: str) -> datetime:
    found = _TIME_RE.search(time_text)
    if found is None:
        raise ValueError(f"No time in '{time_text}'")
    time_str = found.group(0).lower()
    if time_str == "noon":
        return day.replace(hour=12, minute=0)
    if time_str == "midnight":
        return day.replace(hour=0, minute=0)
    return dateutil_parser.parse(time_str.replace(".", ""), default=day)
