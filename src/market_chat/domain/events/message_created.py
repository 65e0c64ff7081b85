from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class MessageCreated:
    message_id: str
    sender_id: str
    receiver_id: str
    channel: str
    content: str
    order_id: str | None

    event_type = "chat.message_created"

    def to_payload(self) -> dict[str, Any]:
        return asdict(self)
