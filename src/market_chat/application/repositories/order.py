from __future__ import annotations

from typing import Protocol

from market_chat.domain.entities.order import OrderRef


class OrderReader(Protocol):
    async def get_many(self, order_ids: list[str]) -> dict[str, OrderRef]: ...
