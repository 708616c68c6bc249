from typing import Optional

from pydantic import Field, field_validator

from app.schemas.camel_base_model import CamelCaseBaseModel as BaseModel
from app.utils.calendar_utils import format_calendar_date, parse_date_string


def _canonical_due_date(value: Optional[str]) -> Optional[str]:
    """Empty means "no date set yet"; anything else must be a D/M/YYYY date."""
    if value is None:
        return None
    value = value.strip()
    if not value:
        return ""
    parsed = parse_date_string(value)
    if not parsed:
        raise ValueError("Due date must be in D/M/YYYY format")
    return format_calendar_date(parsed)


class Task(BaseModel):
    """A task record as stored (camelCase) in the record store"""

    id: str = Field(..., description="Record ID")
    title: str = Field(..., description="Task title")
    due_date: str = Field(default="", description="Due date as D/M/YYYY, empty if unset")
    days_left: Optional[int] = Field(default=None, description="Days until due date")
    description: str = Field(default="", description="Task description")
    completed: bool = Field(default=False, description="Whether the task is done")

    @field_validator("title", "due_date", "description", mode="before")
    @classmethod
    def null_as_empty(cls, v):
        # Records written by older clients may carry null text fields
        return "" if v is None else v

    @field_validator("completed", mode="before")
    @classmethod
    def null_as_open(cls, v):
        return False if v is None else v


class TaskResponse(Task):
    """Task as returned to the panel, with the due badge text"""

    due_label: Optional[str] = Field(
        default=None, description="'N Days Left' or 'Overdue'"
    )


class CreateTaskRequest(BaseModel):
    """Request schema for the New Task form"""

    title: str = Field(..., min_length=1, max_length=500, description="Task title")
    due_date: str = Field(default="", description="Due date as D/M/YYYY")
    description: str = Field(default="", description="Task description")

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("due_date")
    @classmethod
    def validate_due_date(cls, v: str) -> str:
        return _canonical_due_date(v)


class UpdateTaskRequest(BaseModel):
    """Partial update; only the fields sent are written back"""

    title: Optional[str] = Field(None, min_length=1, max_length=500)
    due_date: Optional[str] = Field(None, description="Due date as D/M/YYYY")
    description: Optional[str] = None
    completed: Optional[bool] = None

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("due_date")
    @classmethod
    def validate_due_date(cls, v: Optional[str]) -> Optional[str]:
        return _canonical_due_date(v)
