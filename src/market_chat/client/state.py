"""Client-side message delivery states and the per-thread reducer.

A thread is an immutable tuple of ``LocalMessage`` ordered by creation time.
Every change goes through ``reduce_thread`` so reconciliation is keyed by the
temporary id, never by list position.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from market_chat.domain.entities.attachment import Attachment
from market_chat.domain.entities.message import Message
from market_chat.domain.value_objects.display_time import format_clock_time
from market_chat.domain.value_objects.enums import DeliveryStatus, MessageRole


@dataclass(frozen=True, slots=True)
class Pending:
    temp_id: str

    @property
    def status(self) -> DeliveryStatus:
        return DeliveryStatus.PENDING


@dataclass(frozen=True, slots=True)
class Confirmed:
    id: str

    @property
    def status(self) -> DeliveryStatus:
        return DeliveryStatus.CONFIRMED


@dataclass(frozen=True, slots=True)
class Rejected:
    temp_id: str
    reason: str

    @property
    def status(self) -> DeliveryStatus:
        return DeliveryStatus.REJECTED


Delivery = Pending | Confirmed | Rejected


@dataclass(frozen=True, slots=True)
class LocalMessage:
    delivery: Pending | Confirmed
    content: str
    sender_id: str
    receiver_id: str
    timestamp: str
    created_at: datetime
    read: bool = False
    attachment: Attachment | None = None
    order_id: str | None = None
    client_msg_id: str | None = None

    @property
    def id(self) -> str:
        if isinstance(self.delivery, Confirmed):
            return self.delivery.id
        return self.delivery.temp_id

    @property
    def is_pending(self) -> bool:
        return isinstance(self.delivery, Pending)

    def role_for(self, account_id: str | None) -> MessageRole:
        if account_id is not None and self.sender_id == account_id:
            return MessageRole.SELF
        return MessageRole.COUNTERPARTY


def pending_message(
    temp_id: str,
    sender_id: str,
    receiver_id: str,
    content: str,
    now: datetime,
    *,
    attachment: Attachment | None = None,
    order_id: str | None = None,
) -> LocalMessage:
    return LocalMessage(
        delivery=Pending(temp_id),
        content=content,
        sender_id=sender_id,
        receiver_id=receiver_id,
        timestamp=format_clock_time(now.astimezone()),
        created_at=now,
        read=False,
        attachment=attachment,
        order_id=order_id,
        client_msg_id=temp_id,
    )


def confirmed_message(msg: Message) -> LocalMessage:
    return LocalMessage(
        delivery=Confirmed(msg.id),
        content=msg.content,
        sender_id=msg.sender_id,
        receiver_id=msg.receiver_id,
        timestamp=format_clock_time(msg.created_at.astimezone()),
        created_at=msg.created_at,
        read=msg.read,
        attachment=msg.attachment,
        order_id=msg.order_id,
        client_msg_id=msg.client_msg_id,
    )


# Actions


@dataclass(frozen=True, slots=True)
class HistoryLoaded:
    messages: tuple[LocalMessage, ...]
    # Ids confirmed locally while the fetch was in flight; the snapshot may predate them.
    confirmed_during_fetch: frozenset[str] = frozenset()


@dataclass(frozen=True, slots=True)
class PendingAdded:
    message: LocalMessage


@dataclass(frozen=True, slots=True)
class PendingConfirmed:
    temp_id: str
    message: LocalMessage


@dataclass(frozen=True, slots=True)
class PendingRejected:
    temp_id: str


@dataclass(frozen=True, slots=True)
class MessageRemoved:
    message_id: str


ThreadAction = HistoryLoaded | PendingAdded | PendingConfirmed | PendingRejected | MessageRemoved


def _is_temp(message: LocalMessage, temp_id: str) -> bool:
    return isinstance(message.delivery, Pending) and message.delivery.temp_id == temp_id


def reduce_thread(
    thread: tuple[LocalMessage, ...],
    action: ThreadAction,
) -> tuple[LocalMessage, ...]:
    if isinstance(action, PendingAdded):
        return (*thread, action.message)

    if isinstance(action, PendingConfirmed):
        # Swap in place; the confirmed entry keeps the pending entry's slot.
        if any(m.id == action.message.id for m in thread):
            return tuple(m for m in thread if not _is_temp(m, action.temp_id))
        return tuple(
            action.message if _is_temp(m, action.temp_id) else m
            for m in thread
        )

    if isinstance(action, PendingRejected):
        return tuple(m for m in thread if not _is_temp(m, action.temp_id))

    if isinstance(action, MessageRemoved):
        return tuple(m for m in thread if m.id != action.message_id)

    if isinstance(action, HistoryLoaded):
        # Sends still in flight survive a refetch unless the server already has them.
        echoed = {m.client_msg_id for m in action.messages if m.client_msg_id}
        fetched_ids = {m.id for m in action.messages}
        late = [
            m for m in thread
            if isinstance(m.delivery, Confirmed)
            and m.id in action.confirmed_during_fetch
            and m.id not in fetched_ids
            and m.client_msg_id not in echoed
        ]
        still_pending = tuple(
            m for m in thread
            if isinstance(m.delivery, Pending) and m.delivery.temp_id not in echoed
        )
        merged = sorted([*action.messages, *late], key=lambda m: m.created_at) if late else action.messages
        return (*merged, *still_pending)

    raise TypeError(f"Unknown thread action: {action!r}")
