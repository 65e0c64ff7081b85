"""FastAPI dependency injection helpers."""
from __future__ import annotations

from typing import Annotated, AsyncIterator

from fastapi import Depends

from market_chat.config import settings
from market_chat.domain.value_objects.enums import Channel
from market_chat.infrastructure.db.session import AsyncSessionLocal
from market_chat.infrastructure.db.uow import SqlAlchemyUoW


async def get_uow() -> AsyncIterator[SqlAlchemyUoW]:
    async with AsyncSessionLocal() as session:
        uow = SqlAlchemyUoW(session)
        try:
            yield uow
        finally:
            await session.close()


UoWDep = Annotated[SqlAlchemyUoW, Depends(get_uow)]


def resolve_channel(channel: Channel | None) -> Channel:
    return channel or Channel(settings.DEFAULT_CHANNEL)
