from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, status, Path

from app.services.chat_service import ChatService, get_chat_service
from app.schemas.chat_schemas import (
    ChatListQueryParams,
    SendMessageRequest,
    UpdateChatRequest,
)
from app.utils.datetime_utils import local_now
from app.utils.responses import ResponseBuilder
from app.utils.errors import BusinessLogicError, RemoteStoreError
from app.utils.error_handlers import handle_service_error

chats_router = APIRouter()


@chats_router.get(
    "/",
    response_model=None,
    status_code=status.HTTP_200_OK,
    summary="Get the inbox",
    description="Retrieve all chats, optionally filtered by a case-insensitive title search.",
)
async def get_all_chats(
    request: Request,
    query_params: Annotated[ChatListQueryParams, Query()],
    chat_service: ChatService = Depends(get_chat_service),
):
    chats = await chat_service.list_chats(query_params.search)

    return ResponseBuilder.success(
        request=request,
        data=[chat.model_dump(by_alias=True) for chat in chats],
        message=f"Retrieved {len(chats)} chats",
    )


@chats_router.get(
    "/{chat_id}",
    response_model=None,
    status_code=status.HTTP_200_OK,
    summary="Get a chat with its messages",
)
async def get_chat(
    request: Request,
    chat_id: Annotated[str, Path(description="Chat ID")],
    chat_service: ChatService = Depends(get_chat_service),
):
    try:
        detail = await chat_service.get_chat_detail(chat_id)

        return ResponseBuilder.success(
            request=request,
            data=detail.model_dump(by_alias=True),
            message="Chat retrieved successfully",
        )

    except ValueError as e:
        return handle_service_error(request, e)


@chats_router.patch(
    "/{chat_id}",
    response_model=None,
    status_code=status.HTTP_200_OK,
    summary="Update a chat",
    description="Merge the given fields into the stored chat, e.g. to mark it read. Last write wins.",
)
async def update_chat(
    request: Request,
    chat_data: UpdateChatRequest,
    chat_id: Annotated[str, Path(description="Chat ID to update")],
    chat_service: ChatService = Depends(get_chat_service),
):
    try:
        chat = await chat_service.update_chat(chat_id, chat_data)

        return ResponseBuilder.success(
            request=request,
            data=chat.model_dump(by_alias=True),
            message="Chat updated successfully",
        )

    except ValueError as e:
        return handle_service_error(request, e)
    except RemoteStoreError:
        raise
    except Exception:
        raise BusinessLogicError(
            message="Failed to update chat", error_code="CHAT_UPDATE_FAILED"
        )


@chats_router.post(
    "/{chat_id}/messages",
    response_model=None,
    status_code=status.HTTP_201_CREATED,
    summary="Send a message",
)
async def send_message(
    request: Request,
    message_data: SendMessageRequest,
    chat_id: Annotated[str, Path(description="Chat ID")],
    now: Annotated[datetime, Depends(local_now)],
    chat_service: ChatService = Depends(get_chat_service),
):
    try:
        chat = await chat_service.send_message(chat_id, message_data, now)

        return ResponseBuilder.success(
            request=request,
            data=chat.model_dump(by_alias=True),
            message="Message sent",
            status_code=status.HTTP_201_CREATED,
        )

    except ValueError as e:
        return handle_service_error(request, e)
    except RemoteStoreError:
        raise
    except Exception:
        raise BusinessLogicError(
            message="Failed to send message", error_code="CHAT_UPDATE_FAILED"
        )
