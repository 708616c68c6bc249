from fastapi import APIRouter, Request

from app.config.settings import settings
from app.utils.datetime_utils import utc_now
from app.utils.responses import ResponseBuilder

health_router = APIRouter()


@health_router.get("/")
async def health_check(request: Request):
    """
    Basic health check endpoint

    Returns application status. The record store is not checked here.
    """
    return ResponseBuilder.success(
        request=request,
        data={
            "status": "healthy",
            "service": settings.NAME,
            "version": settings.VERSION,
            "checkedAt": utc_now().isoformat(),
        },
        message="Service is running",
    )
