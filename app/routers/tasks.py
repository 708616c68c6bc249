from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Request, status, Path

from app.services.task_service import TaskService, get_task_service
from app.schemas.task_schemas import CreateTaskRequest, UpdateTaskRequest
from app.utils.datetime_utils import local_now
from app.utils.responses import ResponseBuilder
from app.utils.errors import BusinessLogicError, RemoteStoreError
from app.utils.error_handlers import handle_service_error

tasks_router = APIRouter()


@tasks_router.get(
    "/",
    response_model=None,
    status_code=status.HTTP_200_OK,
    summary="Get the task list",
    description="Retrieve all tasks with open tasks first. Falls back to sample tasks when the record store is empty or unavailable.",
)
async def get_all_tasks(
    request: Request,
    now: Annotated[datetime, Depends(local_now)],
    task_service: TaskService = Depends(get_task_service),
):
    """Get all tasks with recomputed due badges"""
    tasks, used_fallback = await task_service.list_tasks(now)
    data = [task.model_dump(by_alias=True) for task in tasks]

    if used_fallback:
        return ResponseBuilder.warning(
            request=request,
            data=data,
            message="Showing sample tasks",
            warnings=["No tasks could be loaded from the record store"],
        )

    return ResponseBuilder.success(
        request=request,
        data=data,
        message=f"Retrieved {len(data)} tasks",
    )


@tasks_router.post(
    "/",
    response_model=None,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new task",
)
async def create_task(
    request: Request,
    task_data: CreateTaskRequest,
    now: Annotated[datetime, Depends(local_now)],
    task_service: TaskService = Depends(get_task_service),
):
    """Create a task from the New Task form"""
    try:
        task = await task_service.create_task(task_data, now)

        return ResponseBuilder.success(
            request=request,
            data=task.model_dump(by_alias=True),
            message="Task created successfully",
            status_code=status.HTTP_201_CREATED,
        )

    except ValueError as e:
        return handle_service_error(request, e)
    except RemoteStoreError:
        raise
    except Exception:
        raise BusinessLogicError(
            message="Failed to create task", error_code="TASK_CREATE_FAILED"
        )


@tasks_router.patch(
    "/{task_id}",
    response_model=None,
    status_code=status.HTTP_200_OK,
    summary="Update a task",
    description="Merge the given fields into the stored task. Last write wins.",
)
async def update_task(
    request: Request,
    task_data: UpdateTaskRequest,
    task_id: Annotated[str, Path(description="Task ID to update")],
    now: Annotated[datetime, Depends(local_now)],
    task_service: TaskService = Depends(get_task_service),
):
    """Update title, due date, description or completion of a task"""
    try:
        task = await task_service.update_task(task_id, task_data, now)

        return ResponseBuilder.success(
            request=request,
            data=task.model_dump(by_alias=True),
            message="Task updated successfully",
        )

    except ValueError as e:
        return handle_service_error(request, e)
    except RemoteStoreError:
        raise
    except Exception:
        raise BusinessLogicError(
            message="Failed to update task", error_code="TASK_UPDATE_FAILED"
        )


@tasks_router.delete(
    "/{task_id}",
    response_model=None,
    status_code=status.HTTP_200_OK,
    summary="Delete a task",
)
async def delete_task(
    request: Request,
    task_id: Annotated[str, Path(description="Task ID to delete")],
    task_service: TaskService = Depends(get_task_service),
):
    try:
        await task_service.delete_task(task_id)

        return ResponseBuilder.success(
            request=request,
            data={"id": task_id},
            message="Task deleted successfully",
        )

    except ValueError as e:
        return handle_service_error(request, e)
    except RemoteStoreError:
        raise
    except Exception:
        raise BusinessLogicError(
            message="Failed to delete task", error_code="TASK_DELETE_FAILED"
        )
