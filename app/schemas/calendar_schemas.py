from typing import List, Optional

from pydantic import Field

from app.schemas.camel_base_model import CamelCaseBaseModel as BaseModel


class MonthRef(BaseModel):
    year: int
    month: int = Field(..., ge=0, le=11, description="Zero-based month")


class MonthViewQueryParams(BaseModel):
    """Query parameters for the date picker month view"""

    year: Optional[int] = Field(None, ge=1, le=9999, description="Year to show")
    month: Optional[int] = Field(
        None, ge=0, le=11, description="Zero-based month to show"
    )
    selected: Optional[str] = Field(
        None, description="Currently chosen date as D/M/YYYY"
    )


class MonthViewResponse(BaseModel):
    """One month of the date picker"""

    year: int
    month: int = Field(..., description="Zero-based month")
    month_name: str
    day_headers: List[str]
    grid: List[Optional[int]] = Field(..., description="Monday-first cells, None is blank")
    weeks: List[List[Optional[int]]]
    selected_day: Optional[int] = None
    previous: Optional[MonthRef] = Field(
        None, description="Month before this one, None before year 1"
    )
    next: Optional[MonthRef] = Field(
        None, description="Month after this one, None after year 9999"
    )


class DaysRemainingResponse(BaseModel):
    due_date: str = Field(..., description="Due date as D/M/YYYY")
    days_left: int = Field(..., description="Signed whole days until the due date")
    label: str = Field(..., description="'N Days Left' or 'Overdue'")
