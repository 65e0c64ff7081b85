from __future__ import annotations

from market_chat.application.dto.message import SendMessageDTO
from market_chat.application.exceptions import ValidationError


def assert_sendable(dto: SendMessageDTO) -> None:
    """Raise if the message cannot be stored."""
    if not dto.sender_id or not dto.receiver_id:
        raise ValidationError("Sender ID and Receiver ID are required")
    if dto.sender_id == dto.receiver_id:
        raise ValidationError("Cannot send a message to yourself")
    if not dto.content.strip() and dto.attachment is None:
        raise ValidationError("Message content or attachment is required")
