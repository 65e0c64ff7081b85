from __future__ import annotations

from datetime import datetime

from market_chat.api.v1.schemas.common import CamelModel
from market_chat.domain.entities.conversation import ConversationSummary
from market_chat.domain.value_objects.display_time import format_relative_time


class ConversationResponse(CamelModel):
    id: str
    counterparty_name: str
    counterparty_avatar: str | None = None
    subject: str | None = None
    order_id: str | None = None
    last_message: str
    last_message_time: datetime
    last_message_from_me: bool = False
    unread_count: int
    online: bool = False
    time: str = ""

    @classmethod
    def from_entity(cls, conv: ConversationSummary) -> ConversationResponse:
        return cls(
            id=conv.id,
            counterparty_name=conv.counterparty_name,
            counterparty_avatar=conv.counterparty_avatar,
            subject=conv.subject,
            order_id=conv.order_id,
            last_message=conv.last_message,
            last_message_time=conv.last_message_at,
            last_message_from_me=conv.last_message_from_me,
            unread_count=conv.unread_count,
            online=conv.online,
            time=format_relative_time(conv.last_message_at),
        )

    def to_entity(self) -> ConversationSummary:
        return ConversationSummary(
            id=self.id,
            counterparty_name=self.counterparty_name,
            counterparty_avatar=self.counterparty_avatar,
            subject=self.subject,
            order_id=self.order_id,
            last_message=self.last_message,
            last_message_at=self.last_message_time,
            last_message_from_me=self.last_message_from_me,
            unread_count=max(self.unread_count, 0),
            online=self.online,
        )


class ConversationListResponse(CamelModel):
    success: bool = True
    conversations: list[ConversationResponse]
