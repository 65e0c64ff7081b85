from __future__ import annotations

from typing import Protocol

from market_chat.domain.entities.message import Message


class MessageReader(Protocol):
    async def list_between(
        self, owner_id: str, counterparty_id: str, channel: str,
    ) -> list[Message]:
        """Messages exchanged by the pair, oldest first."""
        ...

    async def list_for_account(self, account_id: str, channel: str) -> list[Message]:
        """Every message the account sent or received, newest first."""
        ...

    async def get_by_id(self, message_id: str) -> Message | None: ...


class MessageWriter(Protocol):
    async def create_if_not_exists(self, message: Message) -> tuple[Message, bool]:
        """Insert message. Return (message, created). Conflict on client_msg_id → existing."""
        ...

    async def mark_read(
        self, owner_id: str, counterparty_id: str, channel: str,
    ) -> int:
        """Flag messages the counterparty sent to the owner as read. Returns rows updated."""
        ...

    async def soft_delete(self, message_id: str) -> bool: ...
