from __future__ import annotations

from typing import Protocol

from market_chat.application.dto.message import SendMessageDTO
from market_chat.domain.entities.conversation import ConversationSummary
from market_chat.domain.entities.message import Message


class MessagesGateway(Protocol):
    """Client-side view of the ``/messages`` REST surface.

    Implementations raise ``TransportFailure`` for network errors and
    ``ServerRejection`` for ``success: false`` responses.
    """

    async def list_conversations(
        self, owner_id: str, channel: str,
    ) -> list[ConversationSummary]: ...

    async def list_messages(
        self, owner_id: str, counterparty_id: str, channel: str,
    ) -> list[Message]: ...

    async def send_message(self, dto: SendMessageDTO) -> Message: ...

    async def mark_read(
        self, owner_id: str, counterparty_id: str, channel: str,
    ) -> int: ...

    async def delete_message(self, message_id: str) -> None: ...
