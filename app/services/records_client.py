from typing import Any, Dict, List, Optional

import httpx

from app.config.settings import settings
from app.utils.errors import RemoteStoreError
from app.utils.logging import get_logger

logger = get_logger()

Record = Dict[str, Any]


class RecordsClient:
    """
    Client for the hosted JSON record store (reqres "collections" API).

    Tasks and chats share one collection; every record is
    ``{"id": ..., "data": {..., "type": "task" | "chat"}}``. The store offers
    no partial updates, queries or versioning, so callers read the whole
    collection and write whole records back (last writer wins).
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        project_id: int,
        collection: str = "task",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.project_id = project_id
        self.collection = collection
        self.timeout = timeout
        self._transport = transport

    @property
    def records_path(self) -> str:
        return f"/collections/{self.collection}/records"

    def _headers(self) -> Dict[str, str]:
        if not self.api_key:
            raise RemoteStoreError(
                "Missing required setting: RECORDS_API_KEY",
                error_code="RECORDS_API_KEY_MISSING",
            )
        return {
            "x-api-key": self.api_key,
            "X-Reqres-Env": "prod",
            "Content-Type": "application/json",
        }

    async def _request(
        self, method: str, path: str, json: Optional[Dict[str, Any]] = None
    ) -> httpx.Response:
        headers = self._headers()
        async with httpx.AsyncClient(
            base_url=self.base_url, transport=self._transport, timeout=self.timeout
        ) as client:
            try:
                response = await client.request(
                    method,
                    path,
                    params={"project_id": self.project_id},
                    headers=headers,
                    json=json,
                )
            except httpx.RequestError as e:
                logger.error(f"Record store unreachable ({method} {path}): {e}")
                raise RemoteStoreError(
                    f"Record store request failed: {e}",
                    error_code="RECORD_STORE_UNREACHABLE",
                ) from e

        if response.is_error:
            logger.error(
                f"Record store returned {response.status_code} for {method} {path}: {response.text}"
            )
            raise RemoteStoreError(
                f"Record store returned {response.status_code}",
                error_code="RECORD_STORE_REQUEST_FAILED",
                status_code=response.status_code,
            )
        return response

    @staticmethod
    def flatten(record: Record) -> Record:
        """``{"id": i, "data": {...}}`` -> ``{"id": i, ...}``"""
        data = record.get("data") or {}
        return {**data, "id": str(record["id"])}

    async def fetch_all(self) -> List[Record]:
        """Read the whole collection"""
        response = await self._request("GET", self.records_path)
        return response.json().get("data") or []

    async def fetch_by_type(self, kind: str) -> List[Record]:
        """All records whose ``data.type`` is ``kind``, flattened"""
        records = await self.fetch_all()
        return [
            self.flatten(record)
            for record in records
            if (record.get("data") or {}).get("type") == kind
        ]

    async def find(self, kind: str, record_id: str) -> Optional[Record]:
        """Flattened record of the given kind, or None"""
        for record in await self.fetch_by_type(kind):
            if record["id"] == record_id:
                return record
        return None

    async def create_record(self, data: Dict[str, Any]) -> Record:
        response = await self._request("POST", self.records_path, json={"data": data})
        body = response.json()
        created = body.get("data", body)
        logger.info(f"Created {data.get('type', 'record')} {created.get('id')}")
        return self.flatten(created)

    async def replace_record(self, record_id: str, data: Dict[str, Any]) -> None:
        await self._request(
            "PUT", f"{self.records_path}/{record_id}", json={"data": data}
        )
        logger.info(f"Wrote {data.get('type', 'record')} {record_id}")

    async def delete_record(self, record_id: str) -> None:
        await self._request("DELETE", f"{self.records_path}/{record_id}")
        logger.info(f"Deleted record {record_id}")


def get_records_client() -> RecordsClient:
    """Dependency to provide a RecordsClient configured from settings"""
    return RecordsClient(
        base_url=settings.RECORDS_API_BASE_URL,
        api_key=settings.RECORDS_API_KEY,
        project_id=settings.RECORDS_PROJECT_ID,
        collection=settings.RECORDS_COLLECTION,
        timeout=settings.RECORDS_API_TIMEOUT,
    )
