from __future__ import annotations

from sqlalchemy import and_, or_, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from market_chat.domain.entities.message import Message
from market_chat.infrastructure.db.mappers import message as mapper
from market_chat.infrastructure.db.models.message import MessageModel


class MessageReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_between(
        self,
        owner_id: str,
        counterparty_id: str,
        channel: str,
    ) -> list[Message]:
        stmt = (
            select(MessageModel)
            .where(
                MessageModel.channel == channel,
                MessageModel.deleted.is_(False),
                or_(
                    and_(MessageModel.sender_id == owner_id, MessageModel.receiver_id == counterparty_id),
                    and_(MessageModel.sender_id == counterparty_id, MessageModel.receiver_id == owner_id),
                ),
            )
            .order_by(MessageModel.created_at.asc(), MessageModel.id.asc())
        )
        result = await self._session.execute(stmt)
        return [mapper.model_to_entity(m) for m in result.scalars().all()]

    async def list_for_account(self, account_id: str, channel: str) -> list[Message]:
        stmt = (
            select(MessageModel)
            .where(
                MessageModel.channel == channel,
                MessageModel.deleted.is_(False),
                or_(MessageModel.sender_id == account_id, MessageModel.receiver_id == account_id),
            )
            .order_by(MessageModel.created_at.desc(), MessageModel.id.desc())
        )
        result = await self._session.execute(stmt)
        return [mapper.model_to_entity(m) for m in result.scalars().all()]

    async def get_by_id(self, message_id: str) -> Message | None:
        model = await self._session.get(MessageModel, message_id)
        return mapper.model_to_entity(model) if model else None


class MessageWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create_if_not_exists(self, message: Message) -> tuple[Message, bool]:
        """Insert message idempotently. Returns (message, created_flag)."""
        stmt = (
            pg_insert(MessageModel)
            .values(**mapper.entity_to_values(message))
            .on_conflict_do_nothing(constraint="uq_message_idempotency")
            .returning(MessageModel)
        )
        result = await self._session.execute(stmt)
        row = result.scalar_one_or_none()
        if row is not None:
            return mapper.model_to_entity(row), True

        # Conflict: same sender already used this client_msg_id
        existing = await self._get_by_client_msg_id(message.sender_id, message.client_msg_id)
        assert existing is not None
        return existing, False

    async def _get_by_client_msg_id(self, sender_id: str, client_msg_id: str | None) -> Message | None:
        if client_msg_id is None:
            return None
        stmt = select(MessageModel).where(
            MessageModel.sender_id == sender_id,
            MessageModel.client_msg_id == client_msg_id,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return mapper.model_to_entity(model) if model else None

    async def mark_read(self, owner_id: str, counterparty_id: str, channel: str) -> int:
        stmt = (
            update(MessageModel)
            .where(
                MessageModel.sender_id == counterparty_id,
                MessageModel.receiver_id == owner_id,
                MessageModel.channel == channel,
                MessageModel.read.is_(False),
            )
            .values(read=True)
        )
        result = await self._session.execute(stmt)
        return result.rowcount or 0

    async def soft_delete(self, message_id: str) -> bool:
        stmt = (
            update(MessageModel)
            .where(MessageModel.id == message_id, MessageModel.deleted.is_(False))
            .values(deleted=True)
        )
        result = await self._session.execute(stmt)
        return bool(result.rowcount)
