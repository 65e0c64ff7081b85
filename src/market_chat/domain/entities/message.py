from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from market_chat.domain.entities.attachment import Attachment


@dataclass(frozen=True, slots=True)
class Message:
    id: str
    sender_id: str
    receiver_id: str
    channel: str
    content: str
    order_id: str | None
    attachment: Attachment | None
    client_msg_id: str | None
    read: bool
    deleted: bool
    created_at: datetime

    def counterparty_of(self, account_id: str) -> str:
        return self.receiver_id if self.sender_id == account_id else self.sender_id
