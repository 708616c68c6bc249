from typing import Dict, List, Optional

from pydantic import Field, field_validator

from app.schemas.camel_base_model import CamelCaseBaseModel as BaseModel


class ChatMessage(BaseModel):
    """A single message inside a chat"""

    id: str = Field(..., description="Message ID")
    sender: str = Field(..., description="Display name of the sender")
    text: str = Field(..., description="Message body")
    time: str = Field(..., description="Time the message was sent, HH:MM")
    is_own: bool = Field(default=False, description="Sent by the current user")
    is_new: Optional[bool] = Field(default=None, description="Not yet seen")
    date_label: Optional[str] = Field(
        default=None, description="Day divider shown above this message"
    )

    @field_validator("sender", "text", "time", mode="before")
    @classmethod
    def null_as_empty(cls, v):
        return "" if v is None else v

    @field_validator("is_own", mode="before")
    @classmethod
    def null_as_not_own(cls, v):
        return False if v is None else v


class Chat(BaseModel):
    """A chat record as stored (camelCase) in the record store"""

    id: str = Field(..., description="Record ID")
    title: str = Field(..., description="Chat title")
    last_sender: str = Field(default="", description="Sender of the last message")
    last_message: str = Field(default="", description="Text of the last message")
    last_date: str = Field(default="", description="When the last message was sent")
    unread: bool = Field(default=False, description="Has unread messages")
    participant_count: int = Field(default=0, description="Number of participants")
    participants: List[str] = Field(default_factory=list)
    avatar_letter: Optional[str] = Field(default=None, description="Letter avatar")
    connecting: Optional[bool] = Field(
        default=None, description="Waiting for a team member to join"
    )
    messages: List[ChatMessage] = Field(default_factory=list)

    @field_validator("title", "last_sender", "last_message", "last_date", mode="before")
    @classmethod
    def null_as_empty(cls, v):
        # Records written by older clients may carry null fields
        return "" if v is None else v

    @field_validator("unread", mode="before")
    @classmethod
    def null_as_read(cls, v):
        return False if v is None else v

    @field_validator("participant_count", mode="before")
    @classmethod
    def null_as_zero(cls, v):
        return 0 if v is None else v

    @field_validator("participants", "messages", mode="before")
    @classmethod
    def null_as_empty_list(cls, v):
        return [] if v is None else v


class ChatDetailResponse(BaseModel):
    """Chat with the hints the chat view needs to render it"""

    chat: Chat
    new_message_index: Optional[int] = Field(
        default=None, description="Where to draw the 'New Message' divider"
    )
    sender_colors: Dict[str, str] = Field(
        default_factory=dict, description="Bubble colour per non-own sender"
    )


class ChatListQueryParams(BaseModel):
    """Query parameters for the inbox list"""

    search: Optional[str] = Field(None, description="Case-insensitive title filter")


class UpdateChatRequest(BaseModel):
    """Partial update; only the fields sent are written back"""

    title: Optional[str] = Field(None, min_length=1)
    last_sender: Optional[str] = None
    last_message: Optional[str] = None
    last_date: Optional[str] = None
    unread: Optional[bool] = None
    participant_count: Optional[int] = Field(None, ge=0)
    participants: Optional[List[str]] = None
    avatar_letter: Optional[str] = None
    connecting: Optional[bool] = None
    messages: Optional[List[ChatMessage]] = None


class SendMessageRequest(BaseModel):
    """Request schema for sending a message from the chat view"""

    text: str = Field(..., min_length=1, description="Message body")
    sender: str = Field(default="You", min_length=1, description="Sender name")

    @field_validator("text", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v
