from __future__ import annotations

from market_chat.domain.entities.attachment import Attachment
from market_chat.domain.entities.message import Message
from market_chat.infrastructure.db.models.message import MessageModel


def model_to_entity(model: MessageModel) -> Message:
    return Message(
        id=model.id,
        sender_id=model.sender_id,
        receiver_id=model.receiver_id,
        channel=model.channel,
        content=model.content,
        order_id=model.order_id,
        attachment=Attachment.from_dict(model.attachment) if model.attachment else None,
        client_msg_id=model.client_msg_id,
        read=model.read,
        deleted=model.deleted,
        created_at=model.created_at,
    )


def entity_to_values(entity: Message) -> dict:
    """Column values for an INSERT statement."""
    return {
        "id": entity.id,
        "sender_id": entity.sender_id,
        "receiver_id": entity.receiver_id,
        "channel": entity.channel,
        "content": entity.content,
        "order_id": entity.order_id,
        "attachment": entity.attachment.to_dict() if entity.attachment else None,
        "client_msg_id": entity.client_msg_id,
        "read": entity.read,
        "deleted": entity.deleted,
        "created_at": entity.created_at,
    }
