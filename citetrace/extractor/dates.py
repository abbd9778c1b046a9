"""Date parsing for citation parentheticals."""

import re
from datetime import date

from citetrace.citations import StructuredDate

MONTHS: dict[str, int] = {
    "jan": 1, "january": 1,
    "feb": 2, "february": 2,
    "mar": 3, "march": 3,
    "apr": 4, "april": 4,
    "may": 5,
    "jun": 6, "june": 6,
    "jul": 7, "july": 7,
    "aug": 8, "august": 8,
    "sep": 9, "sept": 9, "september": 9,
    "oct": 10, "october": 10,
    "nov": 11, "november": 11,
    "dec": 12, "december": 12,
}

# Tried in this order; the first one that matches wins.
ABBREVIATED_DATE_RE = re.compile(
    r"\b(Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sept|Sep|Oct|Nov|Dec)\.?\s+(\d{1,2}),?\s+(\d{4})\b",
    re.IGNORECASE,
)
FULL_DATE_RE = re.compile(
    r"\b(January|February|March|April|May|June|July|August|September|October|November|December)"
    r"\s+(\d{1,2}),?\s+(\d{4})\b",
    re.IGNORECASE,
)
NUMERIC_DATE_RE = re.compile(r"\b(\d{1,2})/(\d{1,2})/(\d{4})\b")
YEAR_RE = re.compile(r"\b(\d{4})\b")

DATE_PATTERNS = (ABBREVIATED_DATE_RE, FULL_DATE_RE, NUMERIC_DATE_RE, YEAR_RE)


def parse_month(name: str) -> int:
    """Month number for a full or abbreviated English month name."""
    key = name.lower().rstrip(".")
    if key not in MONTHS:
        raise ValueError(f"Invalid month name: {name}")
    return MONTHS[key]


def to_iso_date(year: int, month: int | None = None, day: int | None = None) -> str:
    if month is not None and day is not None:
        return f"{year:04d}-{month:02d}-{day:02d}"
    if month is not None:
        return f"{year:04d}-{month:02d}"
    return f"{year:04d}"


def parse_date(text: str) -> StructuredDate | None:
    """Find the most specific date in ``text``.

    Abbreviated month names are tried first, then full month names, then
    numeric M/D/YYYY, then a bare four-digit year. A month or day out of
    range ("13/45/2020") drops to the next, less precise form. Returns
    None when nothing date-like is present.
    """
    for regex in (ABBREVIATED_DATE_RE, FULL_DATE_RE):
        match = regex.search(text)
        if match:
            year, month, day = int(match.group(3)), parse_month(match.group(1)), int(match.group(2))
            if _is_calendar_date(year, month, day):
                return _structured(year, month, day)

    match = NUMERIC_DATE_RE.search(text)
    if match:
        year, month, day = int(match.group(3)), int(match.group(1)), int(match.group(2))
        if _is_calendar_date(year, month, day):
            return _structured(year, month, day)

    match = YEAR_RE.search(text)
    if match:
        return _structured(int(match.group(1)))
    return None


def strip_date(text: str) -> str:
    """Remove every date expression from ``text`` (used to isolate the court)."""
    for regex in DATE_PATTERNS:
        text = regex.sub(" ", text)
    return re.sub(r"\s+", " ", text).strip(" ,")


def _is_calendar_date(year: int, month: int, day: int) -> bool:
    try:
        date(year, month, day)
    except ValueError:
        return False
    return True


def _structured(year: int, month: int | None = None, day: int | None = None) -> StructuredDate:
    return StructuredDate(iso=to_iso_date(year, month, day), year=year, month=month, day=day)
