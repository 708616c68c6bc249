import uuid

import httpx
import pytest

from tests.fakes import FakeRecordStore, task_record

API = "/api/v1"


class TestTaskRoutes:
    """Test the task panel endpoints."""

    @pytest.mark.asyncio
    async def test_list_tasks(self, api_client: httpx.AsyncClient):
        response = await api_client.get(f"{API}/tasks/")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["status"] == "success"
        assert body["path"] == f"{API}/tasks/"
        assert [task["id"] for task in body["data"]] == ["t-open", "t-nodate", "t-done"]

        first = body["data"][0]
        assert first["dueDate"] == "12/06/2021"
        assert first["daysLeft"] == 2
        assert first["dueLabel"] == "2 Days Left"
        assert body["data"][2].get("daysLeft") is None

    @pytest.mark.asyncio
    async def test_list_tasks_falls_back_with_warning(
        self, api_client: httpx.AsyncClient, store: FakeRecordStore
    ):
        store.fail_with = 500

        response = await api_client.get(f"{API}/tasks/")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "warning"
        assert body["warnings"]
        assert len(body["data"]) == 5

    @pytest.mark.asyncio
    async def test_create_task(self, api_client: httpx.AsyncClient, store: FakeRecordStore):
        response = await api_client.post(
            f"{API}/tasks/", json={"title": "Renew visa", "dueDate": "14/06/2021"}
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["title"] == "Renew visa"
        assert data["dueLabel"] == "4 Days Left"
        assert store.data_of(data["id"])["dueDate"] == "14/6/2021"

    @pytest.mark.asyncio
    async def test_create_task_with_bad_date(self, api_client: httpx.AsyncClient):
        response = await api_client.post(
            f"{API}/tasks/", json={"title": "Renew visa", "dueDate": "tomorrow"}
        )

        assert response.status_code == 422
        body = response.json()
        assert body["success"] is False
        assert body["meta"]["error_code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_update_task(self, api_client: httpx.AsyncClient, store: FakeRecordStore):
        response = await api_client.patch(
            f"{API}/tasks/t-open", json={"description": "Waiting on documents"}
        )

        assert response.status_code == 200
        assert response.json()["data"]["description"] == "Waiting on documents"
        assert store.data_of("t-open")["description"] == "Waiting on documents"

    @pytest.mark.asyncio
    async def test_update_unknown_task(self, api_client: httpx.AsyncClient):
        response = await api_client.patch(f"{API}/tasks/nope", json={"completed": True})

        assert response.status_code == 404
        assert response.json()["meta"]["error_code"] == "TASK_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_update_when_store_is_down(
        self, api_client: httpx.AsyncClient, store: FakeRecordStore
    ):
        store.fail_with = 500

        response = await api_client.patch(f"{API}/tasks/t-open", json={"completed": True})

        assert response.status_code == 502
        assert response.json()["meta"]["error_code"] == "RECORD_STORE_REQUEST_FAILED"

    @pytest.mark.asyncio
    async def test_task_with_null_field_is_listed_and_updatable(
        self, api_client: httpx.AsyncClient, store: FakeRecordStore
    ):
        store.records.append(task_record("t-null", "Legacy task", description=None))

        response = await api_client.get(f"{API}/tasks/")

        assert response.status_code == 200
        legacy = next(task for task in response.json()["data"] if task["id"] == "t-null")
        assert legacy["description"] == ""

        response = await api_client.patch(f"{API}/tasks/t-null", json={"completed": True})

        assert response.status_code == 200
        assert response.json()["data"]["completed"] is True

    @pytest.mark.asyncio
    async def test_unreadable_task_record(
        self, api_client: httpx.AsyncClient, store: FakeRecordStore
    ):
        store.records.append(task_record("t-bad", "Broken", completed={"state": "done"}))

        listed = await api_client.get(f"{API}/tasks/")
        assert "t-bad" not in [task["id"] for task in listed.json()["data"]]

        response = await api_client.patch(f"{API}/tasks/t-bad", json={"title": "Fixed"})

        assert response.status_code == 502
        assert response.json()["meta"]["error_code"] == "RECORD_STORE_INVALID_RECORD"

    @pytest.mark.asyncio
    async def test_delete_task(self, api_client: httpx.AsyncClient, store: FakeRecordStore):
        response = await api_client.delete(f"{API}/tasks/t-done")

        assert response.status_code == 200
        assert response.json()["data"] == {"id": "t-done"}
        assert store.data_of("t-done") is None


class TestChatRoutes:
    """Test the inbox endpoints."""

    @pytest.mark.asyncio
    async def test_search_chats(self, api_client: httpx.AsyncClient):
        response = await api_client.get(f"{API}/chats/", params={"search": "support"})

        assert response.status_code == 200
        data = response.json()["data"]
        assert [chat["id"] for chat in data] == ["c2"]
        assert data[0]["avatarLetter"] == "F"
        assert data[0]["participantCount"] == 2

    @pytest.mark.asyncio
    async def test_chat_detail(self, api_client: httpx.AsyncClient):
        response = await api_client.get(f"{API}/chats/c1")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["newMessageIndex"] == 2
        assert data["chat"]["messages"][0]["isOwn"] is True
        assert data["senderColors"]["Mary Hilda"] == "#E5A443"

    @pytest.mark.asyncio
    async def test_unknown_chat(self, api_client: httpx.AsyncClient):
        response = await api_client.get(f"{API}/chats/missing")

        assert response.status_code == 404
        assert response.json()["meta"]["error_code"] == "CHAT_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_chat_with_null_fields(
        self, api_client: httpx.AsyncClient, store: FakeRecordStore
    ):
        store.records.append(
            {
                "id": "c9",
                "data": {"type": "chat", "title": "Legacy chat", "lastMessage": None, "messages": None},
            }
        )

        response = await api_client.get(f"{API}/chats/c9")

        assert response.status_code == 200
        chat = response.json()["data"]["chat"]
        assert chat["lastMessage"] == ""
        assert chat["messages"] == []

    @pytest.mark.asyncio
    async def test_mark_chat_read(self, api_client: httpx.AsyncClient, store: FakeRecordStore):
        response = await api_client.patch(f"{API}/chats/c1", json={"unread": False})

        assert response.status_code == 200
        assert store.data_of("c1")["unread"] is False

    @pytest.mark.asyncio
    async def test_send_message(self, api_client: httpx.AsyncClient, store: FakeRecordStore):
        response = await api_client.post(
            f"{API}/chats/c2/messages", json={"text": "Hello, I need help"}
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["lastMessage"] == "Hello, I need help"
        assert data["messages"][-1]["time"] == "09:30"
        assert store.data_of("c2")["messages"][-1]["text"] == "Hello, I need help"


class TestCalendarRoutes:
    """Test the date picker endpoints."""

    @pytest.mark.asyncio
    async def test_month_view(self, api_client: httpx.AsyncClient):
        response = await api_client.get(
            f"{API}/calendar/month",
            params={"year": 2021, "month": 5, "selected": "12/06/2021"},
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["monthName"] == "June"
        assert data["dayHeaders"] == ["M", "T", "W", "Th", "F", "S", "S"]
        assert len(data["grid"]) == 35
        assert data["grid"][:2] == [None, 1]
        assert len(data["weeks"]) == 5
        assert data["selectedDay"] == 12
        assert data["previous"] == {"year": 2021, "month": 4}
        assert data["next"] == {"year": 2021, "month": 6}

    @pytest.mark.asyncio
    async def test_month_view_opens_on_selected_date(self, api_client: httpx.AsyncClient):
        response = await api_client.get(
            f"{API}/calendar/month", params={"selected": "3/2/2024"}
        )

        data = response.json()["data"]
        assert (data["year"], data["month"]) == (2024, 1)
        assert data["selectedDay"] == 3
        assert max(cell for cell in data["grid"] if cell is not None) == 29

    @pytest.mark.asyncio
    async def test_month_view_defaults_to_current_month(self, api_client: httpx.AsyncClient):
        response = await api_client.get(f"{API}/calendar/month")

        data = response.json()["data"]
        assert (data["year"], data["month"]) == (2021, 5)
        assert data.get("selectedDay") is None

    @pytest.mark.asyncio
    async def test_selected_day_only_in_its_month(self, api_client: httpx.AsyncClient):
        response = await api_client.get(
            f"{API}/calendar/month",
            params={"year": 2021, "month": 6, "selected": "12/06/2021"},
        )

        assert response.json()["data"].get("selectedDay") is None

    @pytest.mark.asyncio
    async def test_last_representable_month_has_no_next(self, api_client: httpx.AsyncClient):
        response = await api_client.get(
            f"{API}/calendar/month", params={"year": 9999, "month": 11}
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["monthName"] == "December"
        assert data["previous"] == {"year": 9999, "month": 10}
        assert data.get("next") is None

    @pytest.mark.asyncio
    async def test_first_representable_month_has_no_previous(
        self, api_client: httpx.AsyncClient
    ):
        response = await api_client.get(
            f"{API}/calendar/month", params={"year": 1, "month": 0}
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data.get("previous") is None
        assert data["next"] == {"year": 1, "month": 1}

    @pytest.mark.asyncio
    async def test_selected_on_last_representable_day(self, api_client: httpx.AsyncClient):
        response = await api_client.get(
            f"{API}/calendar/month", params={"selected": "31/12/9999"}
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert (data["year"], data["month"]) == (9999, 11)
        assert data["selectedDay"] == 31
        assert data.get("next") is None

    @pytest.mark.asyncio
    async def test_month_out_of_range(self, api_client: httpx.AsyncClient):
        response = await api_client.get(
            f"{API}/calendar/month", params={"year": 2021, "month": 12}
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_days_remaining(self, api_client: httpx.AsyncClient):
        response = await api_client.get(
            f"{API}/calendar/days-remaining", params={"date": "8/06/2021"}
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["dueDate"] == "8/6/2021"
        assert data["daysLeft"] == -2
        assert data["label"] == "Overdue"

    @pytest.mark.asyncio
    async def test_days_remaining_bad_date(self, api_client: httpx.AsyncClient):
        response = await api_client.get(
            f"{API}/calendar/days-remaining", params={"date": "someday"}
        )

        assert response.status_code == 400
        assert response.json()["meta"]["error_code"] == "INVALID_DATE_STRING"


class TestPlumbing:
    """Test health, request ids and headers."""

    @pytest.mark.asyncio
    async def test_health(self, api_client: httpx.AsyncClient):
        response = await api_client.get(f"{API}/shared/health/")

        assert response.status_code == 200
        assert response.json()["data"]["status"] == "healthy"

    @pytest.mark.asyncio
    async def test_request_id_is_echoed(self, api_client: httpx.AsyncClient):
        request_id = str(uuid.uuid4())

        response = await api_client.get(
            f"{API}/shared/health/", headers={"X-Request-ID": request_id}
        )

        assert response.headers["X-Request-ID"] == request_id
        assert response.json()["requestId"] == request_id

    @pytest.mark.asyncio
    async def test_request_id_is_generated(self, api_client: httpx.AsyncClient):
        response = await api_client.get(
            f"{API}/shared/health/", headers={"X-Request-ID": "not-a-uuid"}
        )

        generated = response.headers["X-Request-ID"]
        assert str(uuid.UUID(generated)) == generated
        assert response.headers["X-Content-Type-Options"] == "nosniff"

    @pytest.mark.asyncio
    async def test_unknown_route(self, api_client: httpx.AsyncClient):
        response = await api_client.get(f"{API}/nothing-here")

        assert response.status_code == 404
        assert response.json()["meta"]["error_code"] == "HTTP_ERROR"
