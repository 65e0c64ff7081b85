"""Shared test fixtures."""
from __future__ import annotations

import asyncio
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from market_chat.application.dto.message import SendMessageDTO
from market_chat.application.exceptions import AppError
from market_chat.application.repositories.outbox import OutboxRecord
from market_chat.domain.entities.account import Account
from market_chat.domain.entities.attachment import Attachment
from market_chat.domain.entities.conversation import ConversationSummary
from market_chat.domain.entities.message import Message
from market_chat.domain.entities.order import OrderRef
from market_chat.domain.value_objects.enums import Channel

BASE_TIME = datetime(2026, 10, 19, 9, 0, tzinfo=timezone.utc)


def make_message(
    *,
    message_id: str | None = None,
    sender_id: str = "me",
    receiver_id: str = "u1",
    content: str = "hello",
    channel: str = Channel.PRODUCT,
    order_id: str | None = None,
    attachment: Attachment | None = None,
    client_msg_id: str | None = None,
    read: bool = False,
    created_at: datetime | None = None,
) -> Message:
    return Message(
        id=message_id or str(uuid.uuid4()),
        sender_id=sender_id,
        receiver_id=receiver_id,
        channel=str(channel),
        content=content,
        order_id=order_id,
        attachment=attachment,
        client_msg_id=client_msg_id,
        read=read,
        deleted=False,
        created_at=created_at or BASE_TIME,
    )


def make_summary(
    conversation_id: str,
    *,
    unread: int = 0,
    last_message: str = "Hi",
    minutes_ago: int = 0,
    name: str | None = None,
    subject: str | None = None,
    order_id: str | None = None,
) -> ConversationSummary:
    return ConversationSummary(
        id=conversation_id,
        counterparty_name=name or f"User {conversation_id}",
        counterparty_avatar=None,
        subject=subject,
        order_id=order_id,
        last_message=last_message,
        last_message_at=BASE_TIME - timedelta(minutes=minutes_ago),
        last_message_from_me=False,
        unread_count=unread,
        online=False,
    )


@dataclass
class FixedClock:
    current: datetime = BASE_TIME
    step: timedelta = timedelta(seconds=1)

    def now(self) -> datetime:
        value = self.current
        self.current = self.current + self.step
        return value


# Server-side fakes


@dataclass
class FakeMessageReader:
    _messages: list[Message] = field(default_factory=list)

    async def list_between(self, owner_id: str, counterparty_id: str, channel: str) -> list[Message]:
        pair = {owner_id, counterparty_id}
        found = [
            m for m in self._messages
            if {m.sender_id, m.receiver_id} == pair and m.channel == channel and not m.deleted
        ]
        return sorted(found, key=lambda m: (m.created_at, m.id))

    async def list_for_account(self, account_id: str, channel: str) -> list[Message]:
        found = [
            m for m in self._messages
            if account_id in (m.sender_id, m.receiver_id) and m.channel == channel and not m.deleted
        ]
        return sorted(found, key=lambda m: (m.created_at, m.id), reverse=True)

    async def get_by_id(self, message_id: str) -> Message | None:
        for m in self._messages:
            if m.id == message_id:
                return m
        return None


@dataclass
class FakeMessageWriter:
    _reader: FakeMessageReader

    async def create_if_not_exists(self, message: Message) -> tuple[Message, bool]:
        if message.client_msg_id is not None:
            for m in self._reader._messages:
                if m.sender_id == message.sender_id and m.client_msg_id == message.client_msg_id:
                    return m, False
        self._reader._messages.append(message)
        return message, True

    async def mark_read(self, owner_id: str, counterparty_id: str, channel: str) -> int:
        updated = 0
        for i, m in enumerate(self._reader._messages):
            if (
                m.sender_id == counterparty_id
                and m.receiver_id == owner_id
                and m.channel == channel
                and not m.read
            ):
                self._reader._messages[i] = replace(m, read=True)
                updated += 1
        return updated

    async def soft_delete(self, message_id: str) -> bool:
        for i, m in enumerate(self._reader._messages):
            if m.id == message_id and not m.deleted:
                self._reader._messages[i] = replace(m, deleted=True)
                return True
        return False


@dataclass
class FakeAccountReader:
    _accounts: dict[str, Account] = field(default_factory=dict)

    async def get_many(self, account_ids: list[str]) -> dict[str, Account]:
        return {i: self._accounts[i] for i in account_ids if i in self._accounts}


@dataclass
class FakeOrderReader:
    _orders: dict[str, OrderRef] = field(default_factory=dict)

    async def get_many(self, order_ids: list[str]) -> dict[str, OrderRef]:
        return {i: self._orders[i] for i in order_ids if i in self._orders}


@dataclass
class FakeOutboxWriter:
    _records: list[dict[str, Any]] = field(default_factory=list)
    _pending: list[OutboxRecord] = field(default_factory=list)
    _sent: list[int] = field(default_factory=list)
    _failed: list[tuple[int, datetime]] = field(default_factory=list)

    async def add(self, event_type: str, payload: dict[str, Any]) -> None:
        self._records.append({"event_type": event_type, "payload": payload})

    async def fetch_pending(self, batch_size: int) -> list[OutboxRecord]:
        return self._pending[:batch_size]

    async def mark_sent(self, ids: list[int]) -> None:
        self._sent.extend(ids)

    async def mark_failed(self, record_id: int, next_retry_at: datetime) -> None:
        self._failed.append((record_id, next_retry_at))


@dataclass
class FakeUoW:
    """In-memory UoW for unit tests."""
    accounts: FakeAccountReader = field(default_factory=FakeAccountReader)
    orders: FakeOrderReader = field(default_factory=FakeOrderReader)
    messages: FakeMessageReader = field(default_factory=FakeMessageReader)
    messages_w: FakeMessageWriter | None = None
    outbox: FakeOutboxWriter = field(default_factory=FakeOutboxWriter)
    _committed: bool = False

    def __post_init__(self) -> None:
        if self.messages_w is None:
            self.messages_w = FakeMessageWriter(self.messages)

    async def flush(self) -> None:
        pass

    async def commit(self) -> None:
        self._committed = True

    async def rollback(self) -> None:
        pass


# Client-side fakes


@dataclass
class FakeGateway:
    """In-memory MessagesGateway.

    ``release``: when set, ``send_message`` blocks until the event fires so a
    test can observe the Pending state. ``history_release`` does the same for
    ``list_messages``, after the snapshot is taken. ``server_ids`` are handed out in order
    before falling back to ``m<n>``.
    """

    owner_id: str = "me"
    conversations: list[ConversationSummary] = field(default_factory=list)
    histories: dict[str, list[Message]] = field(default_factory=dict)
    list_error: AppError | None = None
    history_error: AppError | None = None
    send_error: AppError | None = None
    delete_error: AppError | None = None
    release: asyncio.Event | None = None
    history_release: asyncio.Event | None = None
    server_ids: list[str] = field(default_factory=list)
    clock: FixedClock = field(default_factory=lambda: FixedClock(BASE_TIME + timedelta(hours=1)))
    sent: list[SendMessageDTO] = field(default_factory=list)
    history_calls: list[str] = field(default_factory=list)
    mark_read_calls: list[tuple[str, str, str]] = field(default_factory=list)
    deleted: list[str] = field(default_factory=list)
    _seq: int = 0

    async def list_conversations(self, owner_id: str, channel: str) -> list[ConversationSummary]:
        if self.list_error is not None:
            raise self.list_error
        return list(self.conversations)

    async def list_messages(self, owner_id: str, counterparty_id: str, channel: str) -> list[Message]:
        self.history_calls.append(counterparty_id)
        if self.history_error is not None:
            raise self.history_error
        snapshot = list(self.histories.get(counterparty_id, []))
        if self.history_release is not None:
            await self.history_release.wait()
        return snapshot

    async def send_message(self, dto: SendMessageDTO) -> Message:
        self.sent.append(dto)
        if self.release is not None:
            await self.release.wait()
        if self.send_error is not None:
            raise self.send_error
        self._seq += 1
        msg = make_message(
            message_id=self.server_ids.pop(0) if self.server_ids else f"m{self._seq}",
            sender_id=dto.sender_id,
            receiver_id=dto.receiver_id,
            content=dto.content,
            order_id=dto.order_id,
            attachment=dto.attachment,
            client_msg_id=dto.client_msg_id,
            created_at=self.clock.now(),
        )
        self.histories.setdefault(dto.receiver_id, []).append(msg)
        return msg

    async def mark_read(self, owner_id: str, counterparty_id: str, channel: str) -> int:
        self.mark_read_calls.append((owner_id, counterparty_id, channel))
        return 0

    async def delete_message(self, message_id: str) -> None:
        if self.delete_error is not None:
            raise self.delete_error
        self.deleted.append(message_id)


@dataclass
class FakeUploader:
    uploads: list[str] = field(default_factory=list)

    async def upload(self, name: str, mime_type: str, data: bytes) -> Attachment:
        self.uploads.append(name)
        return Attachment(url=f"https://cdn.test/{name}", name=name, type=mime_type, size=len(data))


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway(
        conversations=[
            make_summary("u1", unread=3, last_message="Hi", minutes_ago=5, order_id="o1"),
            make_summary("u2", unread=0, last_message="Thanks", minutes_ago=60),
        ],
        histories={
            "u1": [
                make_message(message_id="a1", sender_id="u1", receiver_id="me", content="Hi",
                             created_at=BASE_TIME - timedelta(minutes=10)),
                make_message(message_id="a2", sender_id="me", receiver_id="u1", content="Hello!",
                             created_at=BASE_TIME - timedelta(minutes=5)),
            ],
            "u2": [
                make_message(message_id="b1", sender_id="u2", receiver_id="me", content="Thanks",
                             created_at=BASE_TIME - timedelta(minutes=60)),
            ],
        },
    )
