from fastapi import APIRouter

from app.routers.tasks import tasks_router
from app.routers.chats import chats_router
from app.routers.calendar import calendar_router
from app.routers.shared import shared_router

main_router = APIRouter()

# Include domain-based routers
main_router.include_router(tasks_router, prefix="/tasks", tags=["Tasks"])
main_router.include_router(chats_router, prefix="/chats", tags=["Chats"])
main_router.include_router(calendar_router, prefix="/calendar", tags=["Calendar"])
main_router.include_router(shared_router, prefix="/shared", tags=["Shared Services"])
