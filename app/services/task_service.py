from datetime import datetime
from typing import Any, Dict, List, Tuple

from fastapi import Depends
from pydantic import ValidationError

from app.schemas.task_schemas import (
    CreateTaskRequest,
    Task,
    TaskResponse,
    UpdateTaskRequest,
)
from app.services.records_client import RecordsClient, get_records_client
from app.utils.calendar_utils import days_left_label, days_remaining, parse_date_string
from app.utils.errors import RemoteStoreError
from app.utils.logging import get_logger

logger = get_logger()

TASK_RECORD_TYPE = "task"

# Shown when the store is empty or unreachable so the panel is never blank
FALLBACK_TASKS: List[Dict[str, Any]] = [
    {
        "id": "t1",
        "title": "Close off Case #012920- RODRIGUES, Amiguel",
        "dueDate": "12/06/2021",
        "daysLeft": 2,
        "description": (
            "Closing off this case since this application has been cancelled. "
            "No one really understand how this case could possibly be cancelled. "
            "The options and the documents within this document were totally a "
            "guaranteed for a success!"
        ),
        "completed": False,
    },
    {
        "id": "t2",
        "title": "Set up documentation report for several Cases : Case 145443, Case 192829 and Case 182203",
        "dueDate": "14/06/2021",
        "daysLeft": 4,
        "description": (
            "All Cases must include all payment transactions, all documents and "
            "forms filled. All conversations in comments and messages in channels "
            "and emails should be provided as well in."
        ),
        "completed": False,
    },
    {
        "id": "t3",
        "title": "Set up appointment with Dr Blake",
        "dueDate": "22/06/2021",
        "daysLeft": 10,
        "description": "",
        "completed": False,
    },
    {
        "id": "t4",
        "title": "Contact Mr Caleb - video conference?",
        "dueDate": "3/06/2021",
        "daysLeft": None,
        "description": "",
        "completed": True,
    },
    {
        "id": "t5",
        "title": "Assign 3 homework to Client A",
        "dueDate": "2/06/2021",
        "daysLeft": None,
        "description": "",
        "completed": True,
    },
]


class TaskService:
    """Service provider for task list operations against the record store"""

    def __init__(self, records: RecordsClient):
        self.records = records

    # Presentation helpers
    @staticmethod
    def to_response(task: Task, now: datetime) -> TaskResponse:
        """Recompute the due badge for an open task with a usable due date"""
        days_left = None
        label = None
        parsed = parse_date_string(task.due_date)
        if not task.completed and parsed:
            days_left = days_remaining(parsed, now)
            label = days_left_label(days_left)

        return TaskResponse(
            **task.model_dump(exclude={"days_left"}),
            days_left=days_left,
            due_label=label,
        )

    @staticmethod
    def sort_open_first(tasks: List[Task]) -> List[Task]:
        """Open tasks first, completed last, otherwise keep store order"""
        return sorted(tasks, key=lambda task: task.completed)

    @staticmethod
    def valid_tasks(records: List[Dict[str, Any]]) -> List[Task]:
        """Tasks from store records, skipping records that cannot be read"""
        tasks = []
        for record in records:
            try:
                tasks.append(Task.model_validate(record))
            except ValidationError as e:
                logger.warning(
                    f"Skipping malformed task record {record.get('id')}: {e.errors()}"
                )
        return tasks

    @staticmethod
    def _to_record_data(task: Task) -> Dict[str, Any]:
        data = task.model_dump(by_alias=True, exclude={"id"})
        data["type"] = TASK_RECORD_TYPE
        return data

    # Core CRUD Operations
    async def list_tasks(self, now: datetime) -> Tuple[List[TaskResponse], bool]:
        """
        Get all tasks, open ones first.

        Returns the tasks and whether the built-in sample tasks were used
        because the store had none or could not be read.
        """
        used_fallback = False
        try:
            records = await self.records.fetch_by_type(TASK_RECORD_TYPE)
        except RemoteStoreError as e:
            logger.warning(f"Serving fallback tasks, record store failed: {e.message}")
            records = []
            used_fallback = True

        tasks = self.valid_tasks(records)
        if not tasks:
            tasks = self.valid_tasks(FALLBACK_TASKS)
            used_fallback = True

        return [self.to_response(task, now) for task in self.sort_open_first(tasks)], used_fallback

    async def create_task(self, task_data: CreateTaskRequest, now: datetime) -> TaskResponse:
        """Create a new open task"""
        data = {
            "type": TASK_RECORD_TYPE,
            "title": task_data.title,
            "dueDate": task_data.due_date,
            "daysLeft": None,
            "description": task_data.description,
            "completed": False,
        }
        created = await self.records.create_record(data)
        logger.info(f"Created task: {task_data.title}")
        return self.to_response(Task.model_validate(created), now)

    async def update_task(
        self, task_id: str, task_data: UpdateTaskRequest, now: datetime
    ) -> TaskResponse:
        """Merge the sent fields into the stored task and write it back"""
        existing = await self.records.find(TASK_RECORD_TYPE, task_id)
        if existing is None:
            raise ValueError("TASK_NOT_FOUND")

        changes = task_data.model_dump(by_alias=True, exclude_unset=True, exclude_none=True)
        try:
            task = Task.model_validate({**existing, **changes})
        except ValidationError as e:
            raise RemoteStoreError(
                f"Stored task {task_id} is malformed: {e.errors()}",
                error_code="RECORD_STORE_INVALID_RECORD",
            ) from e

        await self.records.replace_record(task_id, self._to_record_data(task))
        logger.info(f"Updated task {task_id}: {', '.join(changes) or 'no changes'}")
        return self.to_response(task, now)

    async def delete_task(self, task_id: str) -> None:
        existing = await self.records.find(TASK_RECORD_TYPE, task_id)
        if existing is None:
            raise ValueError("TASK_NOT_FOUND")

        await self.records.delete_record(task_id)


def get_task_service(
    records: RecordsClient = Depends(get_records_client),
) -> TaskService:
    """Dependency to provide TaskService instance"""
    return TaskService(records)
