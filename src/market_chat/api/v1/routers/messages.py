from __future__ import annotations

from fastapi import APIRouter, Query

from market_chat.api.deps import UoWDep, resolve_channel
from market_chat.api.v1.schemas.common import StatusResponse
from market_chat.api.v1.schemas.conversation import ConversationListResponse, ConversationResponse
from market_chat.api.v1.schemas.message import (
    MarkReadRequest,
    MarkReadResponse,
    MessageListResponse,
    MessageResponse,
    SendMessageRequest,
    SendMessageResponse,
)
from market_chat.application.dto.message import SendMessageDTO
from market_chat.domain.value_objects.enums import Channel
from market_chat.services import conversation_service, message_service

router = APIRouter(prefix="/messages", tags=["messages"])


@router.get("", response_model=ConversationListResponse | MessageListResponse)
async def get_messages(
    uow: UoWDep,
    owner_id: str = Query(..., alias="ownerId", min_length=1),
    counterparty_id: str | None = Query(None, alias="counterpartyId"),
    channel: Channel | None = Query(None),
) -> ConversationListResponse | MessageListResponse:
    """Conversation directory, or one conversation's history when ``counterpartyId`` is given."""
    resolved = resolve_channel(channel)
    if counterparty_id:
        messages = await message_service.list_messages(
            owner_id, counterparty_id, resolved.value, uow,
        )
        return MessageListResponse(messages=[MessageResponse.from_entity(m) for m in messages])

    conversations = await conversation_service.list_conversations(owner_id, resolved.value, uow)
    return ConversationListResponse(
        conversations=[ConversationResponse.from_entity(c) for c in conversations],
    )


@router.post("", response_model=SendMessageResponse)
async def send_message(body: SendMessageRequest, uow: UoWDep) -> SendMessageResponse:
    dto = SendMessageDTO(
        sender_id=body.sender_id,
        receiver_id=body.receiver_id,
        content=body.content,
        channel=resolve_channel(body.channel),
        order_id=body.order_id,
        attachment=body.attachment.to_entity() if body.attachment else None,
        client_msg_id=body.client_msg_id,
    )
    msg, _created = await message_service.send_message(dto, uow)
    return SendMessageResponse(message=MessageResponse.from_entity(msg))


@router.post("/read", response_model=MarkReadResponse)
async def mark_read(body: MarkReadRequest, uow: UoWDep) -> MarkReadResponse:
    updated = await message_service.mark_read(
        body.owner_id, body.counterparty_id, resolve_channel(body.channel).value, uow,
    )
    return MarkReadResponse(updated=updated)


@router.delete("", response_model=StatusResponse)
async def delete_message(
    uow: UoWDep,
    message_id: str = Query(..., alias="messageId", min_length=1),
) -> StatusResponse:
    await message_service.delete_message(message_id, uow)
    return StatusResponse(success=True, message="Message deleted successfully")
