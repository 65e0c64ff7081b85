from __future__ import annotations

from typing import Protocol

from market_chat.application.repositories.account import AccountReader
from market_chat.application.repositories.message import MessageReader, MessageWriter
from market_chat.application.repositories.order import OrderReader
from market_chat.application.repositories.outbox import OutboxWriter


class UnitOfWork(Protocol):
    accounts: AccountReader
    orders: OrderReader
    messages: MessageReader
    messages_w: MessageWriter
    outbox: OutboxWriter

    async def commit(self) -> None: ...
    async def rollback(self) -> None: ...
    async def flush(self) -> None: ...
