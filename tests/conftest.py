from datetime import datetime

import httpx
import pytest
import pytest_asyncio

from app.main import app
from app.services.records_client import RecordsClient, get_records_client
from app.utils.datetime_utils import local_now

from tests.fakes import (
    BASE_URL,
    NOW,
    SAMPLE_CHAT,
    SAMPLE_SUPPORT_CHAT,
    FakeRecordStore,
    task_record,
)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def store() -> FakeRecordStore:
    return FakeRecordStore(
        [
            task_record("t-done", "Contact Mr Caleb", "3/06/2021", completed=True),
            task_record("t-open", "Close off Case #012920", "12/06/2021"),
            task_record("t-nodate", "Set up appointment with Dr Blake"),
            SAMPLE_CHAT,
            SAMPLE_SUPPORT_CHAT,
        ]
    )


@pytest.fixture
def records_client(store: FakeRecordStore) -> RecordsClient:
    return RecordsClient(
        base_url=BASE_URL,
        api_key="test-key",
        project_id=3664,
        collection="task",
        transport=store.transport,
    )


@pytest_asyncio.fixture
async def api_client(records_client: RecordsClient):
    """HTTP client for the application with the record store and clock replaced."""
    app.dependency_overrides[get_records_client] = lambda: records_client
    app.dependency_overrides[local_now] = lambda: NOW

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client

    app.dependency_overrides.clear()
