from __future__ import annotations

import re
from datetime import date, timedelta
from typing import Callable, Dict, Optional, Tuple

from dateutil.relativedelta import MO, relativedelta

from .models import DateRange
from .patterns import FIRST_WEEK_RANGE, FIRST_WEEK_RE, MONTH_RE, MONTHS, RELATIVE_DATES, YEAR_RE

_YEAR_FOLLOWS = re.compile(r"^\s*,?\s*(?:of\s+)?(?:19|20)\d{2}\b")


def _iso(d: date) -> str:
    return d.isoformat()


def _last_month(today: date) -> Tuple[date, date]:
    first_this = today.replace(day=1)
    return first_this - relativedelta(months=1), first_this - timedelta(days=1)


def _this_month(today: date) -> Tuple[date, date]:
    return today.replace(day=1), today


def _last_week(today: date) -> Tuple[date, date]:
    monday = today + relativedelta(weekday=MO(-1))
    start = monday - timedelta(days=7)
    return start, start + timedelta(days=6)


def _this_week(today: date) -> Tuple[date, date]:
    return today + relativedelta(weekday=MO(-1)), today


_RELATIVE_WINDOWS: Dict[str, Callable[[date], Tuple[date, date]]] = {
    "last_month": _last_month,
    "this_month": _this_month,
    "last_week": _last_week,
    "this_week": _this_week,
}


def specific_month(text: str) -> Optional[str]:
    """Two-digit month number for the first month name in ``text``.

    "may" only counts as a month when a year follows it ("May 2025").
    """

    for match in MONTH_RE.finditer(text or ""):
        name = match.group(1).lower()
        if name == "may" and not _YEAR_FOLLOWS.match(text[match.end():]):
            continue
        return f"{MONTHS.index(name) + 1:02d}"
    return None


def specific_year(text: str) -> Optional[str]:
    match = YEAR_RE.search(text or "")
    return match.group(1) if match else None


def relative_window(text: str, today: date) -> Tuple[Optional[str], Optional[Tuple[date, date]]]:
    for name, pattern in RELATIVE_DATES:
        if pattern.search(text or ""):
            return name, _RELATIVE_WINDOWS[name](today)
    return None, None


def parse_date_range(question: str, *, today: Optional[date] = None) -> Optional[DateRange]:
    text = (question or "").lower()
    today = today or date.today()
    fields: Dict[str, str] = {}

    month = specific_month(text)
    if month:
        fields["specific_month"] = month
    year = specific_year(text)
    if year:
        fields["specific_year"] = year

    relative, window = relative_window(text, today)
    if relative and window:
        fields["relative_date"] = relative
        fields["start_date"] = _iso(window[0])
        fields["end_date"] = _iso(window[1])

    if FIRST_WEEK_RE.search(text):
        fields["start_date"], fields["end_date"] = FIRST_WEEK_RANGE

    return DateRange(**fields) if fields else None


__all__ = ["parse_date_range", "specific_month", "specific_year", "relative_window"]
