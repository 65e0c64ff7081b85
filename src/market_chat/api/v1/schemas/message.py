from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from market_chat.api.v1.schemas.common import CamelModel
from market_chat.domain.entities.attachment import Attachment
from market_chat.domain.entities.message import Message
from market_chat.domain.value_objects.display_time import format_clock_time
from market_chat.domain.value_objects.enums import Channel


class AttachmentSchema(BaseModel):
    url: str
    name: str
    type: str
    size: int

    def to_entity(self) -> Attachment:
        return Attachment(url=self.url, name=self.name, type=self.type, size=self.size)


class SendMessageRequest(CamelModel):
    sender_id: str
    receiver_id: str
    content: str = ""
    order_id: str | None = None
    attachment: AttachmentSchema | None = None
    client_msg_id: str | None = None
    channel: Channel | None = None


class MarkReadRequest(CamelModel):
    owner_id: str
    counterparty_id: str
    channel: Channel | None = None


class MessageResponse(CamelModel):
    id: str
    content: str
    sender_id: str
    receiver_id: str
    channel: str
    order_id: str | None = None
    attachment: AttachmentSchema | None = None
    client_msg_id: str | None = None
    read: bool
    created_at: datetime
    timestamp: str

    @classmethod
    def from_entity(cls, msg: Message) -> MessageResponse:
        return cls(
            id=msg.id,
            content=msg.content,
            sender_id=msg.sender_id,
            receiver_id=msg.receiver_id,
            channel=msg.channel,
            order_id=msg.order_id,
            attachment=AttachmentSchema(**msg.attachment.to_dict()) if msg.attachment else None,
            client_msg_id=msg.client_msg_id,
            read=msg.read,
            created_at=msg.created_at,
            timestamp=format_clock_time(msg.created_at),
        )

    def to_entity(self) -> Message:
        return Message(
            id=self.id,
            sender_id=self.sender_id,
            receiver_id=self.receiver_id,
            channel=self.channel,
            content=self.content,
            order_id=self.order_id,
            attachment=self.attachment.to_entity() if self.attachment else None,
            client_msg_id=self.client_msg_id,
            read=self.read,
            deleted=False,
            created_at=self.created_at,
        )


class MessageListResponse(CamelModel):
    success: bool = True
    messages: list[MessageResponse]


class SendMessageResponse(CamelModel):
    success: bool = True
    message: MessageResponse


class MarkReadResponse(CamelModel):
    success: bool = True
    updated: int
