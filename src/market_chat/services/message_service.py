from __future__ import annotations

import logging

from market_chat.application.dto.message import SendMessageDTO
from market_chat.application.exceptions import NotFoundError
from market_chat.application.policies.send_rules import assert_sendable
from market_chat.application.ports.clock import Clock, SystemClock
from market_chat.application.uow import UnitOfWork
from market_chat.domain.entities.message import Message
from market_chat.domain.events.message_created import MessageCreated
from market_chat.domain.value_objects.ids import new_message_id

logger = logging.getLogger(__name__)


async def send_message(
    dto: SendMessageDTO,
    uow: UnitOfWork,
    clock: Clock | None = None,
) -> tuple[Message, bool]:
    """Store a message idempotently.

    Returns (message, created). A repeated ``client_msg_id`` from the same
    sender yields the stored message with created=False and no new outbox
    event.
    """
    assert_sendable(dto)
    clock = clock or SystemClock()

    msg = Message(
        id=new_message_id(),
        sender_id=dto.sender_id,
        receiver_id=dto.receiver_id,
        channel=dto.channel.value,
        content=dto.content.strip(),
        order_id=dto.order_id,
        attachment=dto.attachment,
        client_msg_id=dto.client_msg_id,
        read=False,
        deleted=False,
        created_at=clock.now(),
    )

    msg, created = await uow.messages_w.create_if_not_exists(msg)

    if created:
        event = MessageCreated(
            message_id=msg.id,
            sender_id=msg.sender_id,
            receiver_id=msg.receiver_id,
            channel=msg.channel,
            content=msg.content,
            order_id=msg.order_id,
        )
        await uow.outbox.add(event.event_type, event.to_payload())
        await uow.commit()
        logger.info("Message %s stored (%s -> %s)", msg.id, msg.sender_id, msg.receiver_id)
    else:
        logger.info("Duplicate send for client_msg_id=%s, returning %s", dto.client_msg_id, msg.id)

    return msg, created


async def list_messages(
    owner_id: str,
    counterparty_id: str,
    channel: str,
    uow: UnitOfWork,
) -> list[Message]:
    return await uow.messages.list_between(owner_id, counterparty_id, channel)


async def mark_read(
    owner_id: str,
    counterparty_id: str,
    channel: str,
    uow: UnitOfWork,
) -> int:
    updated = await uow.messages_w.mark_read(owner_id, counterparty_id, channel)
    await uow.commit()
    return updated


async def delete_message(message_id: str, uow: UnitOfWork) -> None:
    deleted = await uow.messages_w.soft_delete(message_id)
    if not deleted:
        raise NotFoundError("Message not found")
    await uow.commit()
