from __future__ import annotations

import uuid
from typing import NewType

AccountId = NewType("AccountId", str)
MessageId = NewType("MessageId", str)

TEMP_ID_PREFIX = "temp-"


def new_message_id() -> MessageId:
    return MessageId(str(uuid.uuid4()))


def new_temp_id() -> MessageId:
    """Client-issued id; never collides with a server id (those are bare UUIDs)."""
    return MessageId(f"{TEMP_ID_PREFIX}{uuid.uuid4().hex}")


def is_temp_id(message_id: str) -> bool:
    return message_id.startswith(TEMP_ID_PREFIX)
