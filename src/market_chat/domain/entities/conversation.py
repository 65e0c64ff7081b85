from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class ConversationSummary:
    """Derived view of all messages exchanged between an owner and one counterparty.

    ``id`` is the counterparty's account id: the directory is always scoped to
    the owner, so the counterparty identifies the conversation.
    """

    id: str
    counterparty_name: str
    counterparty_avatar: str | None
    subject: str | None
    order_id: str | None
    last_message: str
    last_message_at: datetime
    last_message_from_me: bool
    unread_count: int
    online: bool
