"""
Due-date and calendar computations shared by the task routes and the date picker.

Dates travel as ``D/M/YYYY`` strings (no zero padding). Internally a
``CalendarDate`` keeps the month zero-based, the same way the picker pages
through months. Everything in here is pure: "now" is always passed in.
"""

import calendar
import re
from datetime import date, datetime, timedelta
from typing import List, Optional, Tuple, Union

from dateutil.relativedelta import relativedelta
from pydantic import BaseModel, ConfigDict

from app.utils.datetime_utils import to_utc

MONTH_NAMES = [
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
]
DAY_HEADERS = ["M", "T", "W", "Th", "F", "S", "S"]

OVERDUE_LABEL = "Overdue"

_ONE_DAY = timedelta(days=1)
_LEADING_INT = re.compile(r"^\s*([+-]?[0-9]+)")

MonthGrid = List[Optional[int]]


class CalendarDate(BaseModel):
    """A calendar day without time of day. ``month`` is zero-based (0 = January)."""

    model_config = ConfigDict(frozen=True)

    year: int
    month: int
    day: int

    @classmethod
    def from_date(cls, value: date) -> "CalendarDate":
        return cls(year=value.year, month=value.month - 1, day=value.day)

    def to_date(self) -> date:
        return date(self.year, self.month + 1, self.day)


class ParseFailure:
    """Result of parsing a string that is not a ``D/M/YYYY`` date."""

    _instance: Optional["ParseFailure"] = None

    def __new__(cls) -> "ParseFailure":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "PARSE_FAILURE"


PARSE_FAILURE = ParseFailure()


def _parse_leading_int(part: str) -> Optional[int]:
    match = _LEADING_INT.match(part)
    return int(match.group(1)) if match else None


def _make_date(year: int, month: int, day: int) -> date:
    """
    Build a date the way local date construction does, rolling over
    out-of-range months and days into neighbouring months and years.

    Two-digit years (0-99) are read as 19xx.
    """
    if 0 <= year <= 99:
        year += 1900
    year, month = divmod(year * 12 + month, 12)
    return date(year, month + 1, 1) + timedelta(days=day - 1)


def parse_date_string(value: Optional[str]) -> Union[CalendarDate, ParseFailure]:
    """
    Parse a ``D/M/YYYY`` (or ``DD/MM/YYYY``) string.

    Returns ``PARSE_FAILURE`` instead of raising: an empty or half-typed due
    date is an ordinary state for the task panel. Day and month magnitudes are
    not range-checked; ``32/1/2021`` becomes 1 February 2021.
    """
    if not value:
        return PARSE_FAILURE

    parts = value.split("/")
    if len(parts) != 3:
        return PARSE_FAILURE

    day, month, year = (_parse_leading_int(part) for part in parts)
    if day is None or month is None or year is None:
        return PARSE_FAILURE

    try:
        resolved = _make_date(year, month - 1, day)
    except (ValueError, OverflowError):
        # Rolled outside the range a date can represent
        return PARSE_FAILURE

    return CalendarDate.from_date(resolved)


def format_calendar_date(value: CalendarDate) -> str:
    """Serialize a date back to storage form, e.g. ``12/6/2021``."""
    return f"{value.day}/{value.month + 1}/{value.year}"


def days_remaining(value: CalendarDate, now: datetime) -> int:
    """
    Whole days from ``now`` until local midnight at the start of ``value``,
    rounded up.

    Zero means due today (or later today), negative means overdue. An aware
    ``now`` makes midnight be taken in the same time zone and counts elapsed
    time, so a daylight saving night is 23 or 25 hours. A naive ``now``
    compares wall clock readings.

    Args:
        value: Due date
        now: The instant to measure from

    Returns:
        int: Signed day count
    """
    midnight = datetime(value.year, value.month + 1, value.day)
    if now.tzinfo is not None:
        delta = to_utc(midnight.replace(tzinfo=now.tzinfo)) - to_utc(now)
    else:
        delta = midnight - now

    micros = delta // timedelta(microseconds=1)
    day_micros = _ONE_DAY // timedelta(microseconds=1)
    return -(-micros // day_micros)


def days_left_label(days_left: int) -> str:
    """Label shown beside a task: ``Overdue`` below zero, ``N Days Left`` otherwise."""
    if days_left < 0:
        return OVERDUE_LABEL
    return f"{days_left} Days Left"


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month + 1)[1]


def month_start_offset(year: int, month: int) -> int:
    """Number of blank cells before day 1 in a Monday-first week row."""
    # isoweekday(): Monday=1 .. Sunday=7, so % 7 gives Sunday=0 .. Saturday=6
    sunday_first = date(year, month + 1, 1).isoweekday() % 7
    return (sunday_first + 6) % 7


def build_month_grid(year: int, month: int) -> MonthGrid:
    """
    Build the Monday-first cells for one month view.

    Leading blanks up to the first weekday, the day numbers, then trailing
    blanks until the grid fills whole weeks. ``month`` must already be
    normalised to 0-11 (see ``shift_month``).
    """
    cells: MonthGrid = [None] * month_start_offset(year, month)
    cells.extend(range(1, days_in_month(year, month) + 1))
    while len(cells) % 7 != 0:
        cells.append(None)
    return cells


def selected_day_in_grid(
    grid: MonthGrid,
    year: int,
    month: int,
    selected: Union[CalendarDate, ParseFailure, None],
) -> Optional[int]:
    """Day number to highlight, only when ``selected`` falls in the grid's month."""
    if not selected:
        return None
    if selected.year != year or selected.month != month:
        return None
    return selected.day if selected.day in grid else None


def grid_weeks(grid: MonthGrid) -> List[MonthGrid]:
    return [grid[i : i + 7] for i in range(0, len(grid), 7)]


def shift_month(year: int, month: int, delta: int) -> Tuple[int, int]:
    """Move ``delta`` months from (year, zero-based month), rolling the year."""
    shifted = date(year, month + 1, 1) + relativedelta(months=delta)
    return shifted.year, shifted.month - 1
