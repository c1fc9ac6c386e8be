"""Resolution of free-form date and period expressions.

The grammar is a fixed phrase table plus an ordered list of absolute formats:

* single words: ``today``, ``yesterday``, ``tomorrow``
* ``this|last|next`` + ``week|month`` (week starts on Monday)
* periods: ``this month``/``current month``, ``last month``, ``this week``,
  ``last week``, ``<Month> <Year>`` and ``YYYY-MM``
* absolute dates, first matching format wins

``MM/DD/YYYY`` is tried before ``DD/MM/YYYY``, so ``02/01/2024`` is February 1.
Relative words resolve against the wall clock unless ``today`` is passed in.
"""

import re
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from decimal import Decimal

from hours.app.core.errors import ParseError
from hours.app.core.time import local_today

DATE_FORMATS = (
    "%Y-%m-%d",
    "%m/%d/%Y",
    "%d/%m/%Y",
    "%B %d, %Y",
    "%b %d, %Y",
    "%d %B %Y",
    "%d %b %Y",
)

MONTHS = {
    "january": 1,
    "february": 2,
    "march": 3,
    "april": 4,
    "may": 5,
    "june": 6,
    "july": 7,
    "august": 8,
    "september": 9,
    "october": 10,
    "november": 11,
    "december": 12,
    "jan": 1,
    "feb": 2,
    "mar": 3,
    "apr": 4,
    "jun": 6,
    "jul": 7,
    "aug": 8,
    "sep": 9,
    "oct": 10,
    "nov": 11,
    "dec": 12,
}

RELATIVE_PREFIXES = {"this ": 0, "last ": -1, "next ": 1}
SINGLE_DAY_OFFSETS = {"today": 0, "yesterday": -1, "tomorrow": 1}
TIME_KEYWORDS = {"today", "yesterday", "tomorrow", "week", "month", "this", "last", "next", "for"}

MONTH_YEAR_RE = re.compile(r"([a-z]+)\s+(\d{4})")
ISO_MONTH_RE = re.compile(r"(\d{4})-(\d{2})")
HOURS_RE = re.compile(r"(\d+(?:\.\d+)?)\s*hours?")
CLIENT_RE = re.compile(r"for\s+(\w+(?:\s+\w+)?)")
QUOTED_RE = re.compile(r'"([^"]+)"')


@dataclass(frozen=True)
class Period:
    """Inclusive date range."""

    start: date
    end: date

    def __contains__(self, day: date) -> bool:
        return self.start <= day <= self.end


@dataclass
class ParsedEntry:
    client_name: str
    hours: Decimal
    dates: list[date] = field(default_factory=list)
    description: str | None = None


def _normalize(value: str) -> str:
    return " ".join(value.strip().lower().split())


def _is_number(word: str) -> bool:
    return word.replace(".", "", 1).isdigit()


def start_of_week(day: date, week_offset: int = 0) -> date:
    """Monday of the ISO week containing ``day``, shifted by whole weeks."""
    return day - timedelta(days=day.isoweekday() - 1) + timedelta(weeks=week_offset)


def add_months(day: date, months: int) -> date:
    """First day of the month ``months`` away from the month containing ``day``."""
    index = day.year * 12 + (day.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def month_range(year: int, month: int) -> Period:
    start = date(year, month, 1)
    end = add_months(start, 1) - timedelta(days=1)
    return Period(start, end)


def week_range(today: date, week_offset: int = 0) -> Period:
    start = start_of_week(today, week_offset)
    return Period(start, start + timedelta(days=6))


def week_dates(week_offset: int = 0, today: date | None = None) -> list[date]:
    """The five weekdays (Monday to Friday) of the current or an offset week."""
    monday = start_of_week(today or local_today(), week_offset)
    return [monday + timedelta(days=i) for i in range(5)]


def parse_relative_date(value: str, week_offset: int, today: date | None = None) -> date:
    """Resolve ``this|last|next week|month`` to the first day of that week or month."""
    today = today or local_today()
    if "week" in value:
        return start_of_week(today, week_offset)
    if "month" in value:
        return add_months(today, week_offset)
    raise ParseError(value, f"unable to parse relative date: {value}")


def parse_date(value: str, today: date | None = None) -> date:
    """Resolve a single date expression, trying absolute formats in declaration order."""
    if value is None:
        raise ParseError("", "unable to parse date: empty value")
    normalized = _normalize(value)
    if not normalized:
        raise ParseError(value, "unable to parse date: empty value")

    if normalized in SINGLE_DAY_OFFSETS:
        return (today or local_today()) + timedelta(days=SINGLE_DAY_OFFSETS[normalized])

    for prefix, offset in RELATIVE_PREFIXES.items():
        if normalized.startswith(prefix):
            return parse_relative_date(normalized, offset, today)

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(normalized, fmt).date()
        except ValueError:
            continue

    raise ParseError(value)


def parse_period(value: str, today: date | None = None) -> Period:
    """Resolve a period expression to an inclusive ``Period``."""
    normalized = _normalize(value or "")
    today = today or local_today()

    if normalized in ("this month", "current month"):
        return month_range(today.year, today.month)
    if normalized == "last month":
        previous = add_months(today, -1)
        return month_range(previous.year, previous.month)
    if normalized == "this week":
        return week_range(today, 0)
    if normalized == "last week":
        return week_range(today, -1)

    year = month = None
    match = MONTH_YEAR_RE.fullmatch(normalized)
    if match:
        year, month = int(match.group(2)), MONTHS.get(match.group(1))
    else:
        match = ISO_MONTH_RE.fullmatch(normalized)
        if match and 1 <= int(match.group(2)) <= 12:
            year, month = int(match.group(1)), int(match.group(2))

    if year is not None and month is not None:
        try:
            return month_range(year, month)
        except ValueError:
            # year 0, or the month after December 9999
            raise ParseError(value, f"unable to parse period: {value}") from None

    raise ParseError(value, f"unable to parse period: {value}")


def parse_natural_language(text: str, today: date | None = None) -> ParsedEntry:
    """
    Pull hours, client, dates and an optional quoted description out of a sentence.

    Example: ``logged 3.5 hours for acme corp yesterday "API review"``.
    """
    lowered = text.lower()
    today = today or local_today()

    hours_match = HOURS_RE.search(lowered)
    if not hours_match:
        raise ParseError(text, "no hours specified in input")
    hours = Decimal(hours_match.group(1))

    client_name = ""
    client_match = CLIENT_RE.search(lowered)
    if client_match:
        words = [word for word in client_match.group(1).split() if word not in TIME_KEYWORDS]
        client_name = " ".join(words)
    else:
        for i, word in enumerate(lowered.split()):
            if i > 0 and "hour" not in word and word not in TIME_KEYWORDS and not _is_number(word):
                client_name = word
                break
    if not client_name:
        raise ParseError(text, "no client name found in input")

    if "this week" in lowered:
        dates = week_dates(0, today)
    elif "last week" in lowered:
        dates = week_dates(-1, today)
    elif "yesterday" in lowered:
        dates = [today - timedelta(days=1)]
    else:
        dates = [today]

    description_match = QUOTED_RE.search(text)
    return ParsedEntry(
        client_name=client_name.title(),
        hours=hours,
        dates=dates,
        description=description_match.group(1) if description_match else None,
    )

