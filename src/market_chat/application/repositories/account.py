from __future__ import annotations

from typing import Protocol

from market_chat.domain.entities.account import Account


class AccountReader(Protocol):
    async def get_many(self, account_ids: list[str]) -> dict[str, Account]: ...
