from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from market_chat.domain.entities.account import Account
from market_chat.domain.entities.order import OrderRef
from market_chat.infrastructure.db.mappers.account import account_to_entity, order_to_entity
from market_chat.infrastructure.db.models.account import AccountModel
from market_chat.infrastructure.db.models.order import OrderModel


class AccountReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_many(self, account_ids: list[str]) -> dict[str, Account]:
        if not account_ids:
            return {}
        result = await self._session.execute(
            select(AccountModel).where(AccountModel.id.in_(account_ids))
        )
        return {m.id: account_to_entity(m) for m in result.scalars().all()}


class OrderReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_many(self, order_ids: list[str]) -> dict[str, OrderRef]:
        if not order_ids:
            return {}
        result = await self._session.execute(
            select(OrderModel).where(OrderModel.id.in_(order_ids))
        )
        return {m.id: order_to_entity(m) for m in result.scalars().all()}
