import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import Depends
from pydantic import ValidationError

from app.schemas.chat_schemas import (
    Chat,
    ChatDetailResponse,
    ChatMessage,
    SendMessageRequest,
    UpdateChatRequest,
)
from app.services.records_client import RecordsClient, get_records_client
from app.utils.calendar_utils import CalendarDate, format_calendar_date
from app.utils.errors import RemoteStoreError
from app.utils.logging import get_logger

logger = get_logger()

CHAT_RECORD_TYPE = "chat"

# Bubble colours handed out to other participants in order of first appearance
SENDER_PALETTE = ["#E5A443", "#9B51E0", "#43B78D", "#2F80ED"]


class ChatService:
    """Service provider for inbox operations against the record store"""

    def __init__(self, records: RecordsClient):
        self.records = records

    @staticmethod
    def filter_by_title(chats: List[Chat], search: Optional[str]) -> List[Chat]:
        if not search:
            return chats
        needle = search.lower()
        return [chat for chat in chats if needle in chat.title.lower()]

    @staticmethod
    def new_message_index(messages: List[ChatMessage]) -> Optional[int]:
        """Index of the first unseen message; no divider when it opens the chat"""
        for index, message in enumerate(messages):
            if message.is_new:
                return index if index > 0 else None
        return None

    @staticmethod
    def assign_sender_colors(messages: List[ChatMessage]) -> Dict[str, str]:
        colors: Dict[str, str] = {}
        for message in messages:
            if message.is_own or message.sender in colors:
                continue
            colors[message.sender] = SENDER_PALETTE[len(colors) % len(SENDER_PALETTE)]
        return colors

    @staticmethod
    def _to_record_data(chat: Chat) -> Dict[str, Any]:
        data = chat.model_dump(by_alias=True, exclude={"id"}, exclude_none=True)
        data["type"] = CHAT_RECORD_TYPE
        return data

    async def _get_chat(self, chat_id: str) -> Chat:
        record = await self.records.find(CHAT_RECORD_TYPE, chat_id)
        if record is None:
            raise ValueError("CHAT_NOT_FOUND")
        try:
            return Chat.model_validate(record)
        except ValidationError as e:
            raise RemoteStoreError(
                f"Stored chat {chat_id} is malformed: {e.errors()}",
                error_code="RECORD_STORE_INVALID_RECORD",
            ) from e

    async def list_chats(self, search: Optional[str] = None) -> List[Chat]:
        records = await self.records.fetch_by_type(CHAT_RECORD_TYPE)
        chats = []
        for record in records:
            try:
                chats.append(Chat.model_validate(record))
            except ValidationError as e:
                logger.warning(
                    f"Skipping malformed chat record {record.get('id')}: {e.errors()}"
                )
        return self.filter_by_title(chats, search)

    async def get_chat_detail(self, chat_id: str) -> ChatDetailResponse:
        chat = await self._get_chat(chat_id)
        return ChatDetailResponse(
            chat=chat,
            new_message_index=self.new_message_index(chat.messages),
            sender_colors=self.assign_sender_colors(chat.messages),
        )

    async def update_chat(self, chat_id: str, chat_data: UpdateChatRequest) -> Chat:
        """Merge the sent fields into the stored chat and write it back"""
        chat = await self._get_chat(chat_id)
        changes = chat_data.model_dump(by_alias=True, exclude_unset=True, exclude_none=True)
        updated = Chat.model_validate({**chat.model_dump(by_alias=True), **changes})

        await self.records.replace_record(chat_id, self._to_record_data(updated))
        logger.info(f"Updated chat {chat_id}: {', '.join(changes) or 'no changes'}")
        return updated

    async def send_message(
        self, chat_id: str, message_data: SendMessageRequest, now: datetime
    ) -> Chat:
        """Append an own message and move the chat preview to it"""
        chat = await self._get_chat(chat_id)
        message = ChatMessage(
            id=str(uuid.uuid4()),
            sender=message_data.sender,
            text=message_data.text,
            time=now.strftime("%H:%M"),
            is_own=True,
        )
        today = format_calendar_date(CalendarDate.from_date(now.date()))
        updated = chat.model_copy(
            update={
                "messages": [*chat.messages, message],
                "last_sender": message.sender,
                "last_message": message.text,
                "last_date": f"{today} {message.time}",
                "unread": False,
            }
        )

        await self.records.replace_record(chat_id, self._to_record_data(updated))
        logger.info(f"Sent message {message.id} to chat {chat_id}")
        return updated


def get_chat_service(
    records: RecordsClient = Depends(get_records_client),
) -> ChatService:
    """Dependency to provide ChatService instance"""
    return ChatService(records)
