from datetime import datetime
from typing import Optional

from app.schemas.calendar_schemas import (
    DaysRemainingResponse,
    MonthRef,
    MonthViewQueryParams,
    MonthViewResponse,
)
from app.utils.calendar_utils import (
    CalendarDate,
    DAY_HEADERS,
    MONTH_NAMES,
    build_month_grid,
    days_left_label,
    days_remaining,
    format_calendar_date,
    grid_weeks,
    parse_date_string,
    selected_day_in_grid,
    shift_month,
)


class CalendarService:
    """Date picker and due badge data for the task panel"""

    @staticmethod
    def _neighbour(year: int, month: int, delta: int) -> Optional[MonthRef]:
        # No page before January of year 1 or after December 9999
        try:
            shifted_year, shifted_month = shift_month(year, month, delta)
        except (ValueError, OverflowError):
            return None
        return MonthRef(year=shifted_year, month=shifted_month)

    @classmethod
    def build_month_view(cls, query: MonthViewQueryParams, now: datetime) -> MonthViewResponse:
        """
        Build one month of the picker.

        Without an explicit year/month the picker opens on the selected date's
        month, or on the current month when nothing parseable is selected.
        """
        selected = parse_date_string(query.selected)
        opened_on = selected or CalendarDate.from_date(now.date())
        year = query.year if query.year is not None else opened_on.year
        month = query.month if query.month is not None else opened_on.month

        grid = build_month_grid(year, month)

        return MonthViewResponse(
            year=year,
            month=month,
            month_name=MONTH_NAMES[month],
            day_headers=DAY_HEADERS,
            grid=grid,
            weeks=grid_weeks(grid),
            selected_day=selected_day_in_grid(grid, year, month, selected),
            previous=cls._neighbour(year, month, -1),
            next=cls._neighbour(year, month, 1),
        )

    @staticmethod
    def describe_due_date(value: str, now: datetime) -> DaysRemainingResponse:
        parsed = parse_date_string(value)
        if not parsed:
            raise ValueError("INVALID_DATE_STRING")

        days_left = days_remaining(parsed, now)
        return DaysRemainingResponse(
            due_date=format_calendar_date(parsed),
            days_left=days_left,
            label=days_left_label(days_left),
        )


def get_calendar_service() -> CalendarService:
    """Dependency to provide CalendarService instance"""
    return CalendarService()
