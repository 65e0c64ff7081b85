from __future__ import annotations

from dataclasses import dataclass

from market_chat.domain.entities.attachment import Attachment
from market_chat.domain.value_objects.enums import Channel


@dataclass(frozen=True, slots=True)
class SendMessageDTO:
    sender_id: str
    receiver_id: str
    content: str = ""
    channel: Channel = Channel.PRODUCT
    order_id: str | None = None
    attachment: Attachment | None = None
    client_msg_id: str | None = None
