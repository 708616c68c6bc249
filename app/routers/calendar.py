from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, status

from app.services.calendar_service import CalendarService, get_calendar_service
from app.schemas.calendar_schemas import MonthViewQueryParams
from app.utils.datetime_utils import local_now
from app.utils.responses import ResponseBuilder
from app.utils.error_handlers import handle_service_error

calendar_router = APIRouter()


@calendar_router.get(
    "/month",
    response_model=None,
    status_code=status.HTTP_200_OK,
    summary="Get one month of the date picker",
    description="Monday-first grid for a zero-based month, with the selected day and the neighbouring months.",
)
async def get_month_view(
    request: Request,
    query_params: Annotated[MonthViewQueryParams, Query()],
    now: Annotated[datetime, Depends(local_now)],
    calendar_service: CalendarService = Depends(get_calendar_service),
):
    try:
        month_view = calendar_service.build_month_view(query_params, now)

        return ResponseBuilder.success(
            request=request,
            data=month_view.model_dump(by_alias=True),
            message=f"{month_view.month_name} {month_view.year}",
        )

    except ValueError as e:
        return handle_service_error(request, e)


@calendar_router.get(
    "/days-remaining",
    response_model=None,
    status_code=status.HTTP_200_OK,
    summary="Days left until a due date",
)
async def get_days_remaining(
    request: Request,
    date: Annotated[str, Query(description="Due date as D/M/YYYY")],
    now: Annotated[datetime, Depends(local_now)],
    calendar_service: CalendarService = Depends(get_calendar_service),
):
    try:
        result = calendar_service.describe_due_date(date, now)

        return ResponseBuilder.success(
            request=request,
            data=result.model_dump(by_alias=True),
            message=result.label,
        )

    except ValueError as e:
        return handle_service_error(request, e)
