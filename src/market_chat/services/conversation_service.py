from __future__ import annotations

from market_chat.application.uow import UnitOfWork
from market_chat.domain.entities.account import Account
from market_chat.domain.entities.conversation import ConversationSummary
from market_chat.domain.entities.message import Message
from market_chat.domain.entities.order import OrderRef


def build_summaries(
    owner_id: str,
    messages: list[Message],
    accounts: dict[str, Account],
    orders: dict[str, OrderRef],
) -> list[ConversationSummary]:
    """Group an account's messages by counterparty, most recent conversation first.

    ``messages`` must be ordered newest first.
    """
    latest: dict[str, Message] = {}
    order_ids: dict[str, str] = {}
    unread: dict[str, int] = {}

    for msg in messages:
        other = msg.counterparty_of(owner_id)
        latest.setdefault(other, msg)
        if msg.order_id and other not in order_ids:
            order_ids[other] = msg.order_id
        if msg.receiver_id == owner_id and not msg.read:
            unread[other] = unread.get(other, 0) + 1
        else:
            unread.setdefault(other, 0)

    summaries: list[ConversationSummary] = []
    for other, msg in latest.items():
        account = accounts.get(other)
        order_id = order_ids.get(other)
        order = orders.get(order_id) if order_id else None
        summaries.append(
            ConversationSummary(
                id=other,
                counterparty_name=account.name if account else "Unknown user",
                counterparty_avatar=account.image if account else None,
                subject=(order.title or order.order_number) if order else None,
                order_id=order_id,
                last_message=msg.content or ("Sent an attachment" if msg.attachment else ""),
                last_message_at=msg.created_at,
                last_message_from_me=msg.sender_id == owner_id,
                unread_count=unread[other],
                online=account.online if account else False,
            )
        )

    summaries.sort(key=lambda s: s.last_message_at, reverse=True)
    return summaries


async def list_conversations(
    owner_id: str,
    channel: str,
    uow: UnitOfWork,
) -> list[ConversationSummary]:
    messages = await uow.messages.list_for_account(owner_id, channel)
    if not messages:
        return []

    counterparties = sorted({m.counterparty_of(owner_id) for m in messages})
    order_ids = sorted({m.order_id for m in messages if m.order_id})
    accounts = await uow.accounts.get_many(counterparties)
    orders = await uow.orders.get_many(order_ids) if order_ids else {}
    return build_summaries(owner_id, messages, accounts, orders)
