from __future__ import annotations

import logging

from market_chat.application.exceptions import ServerRejection, TransportFailure
from market_chat.application.ports.messages_gateway import MessagesGateway
from market_chat.client.state import HistoryLoaded, MessageRemoved, confirmed_message
from market_chat.client.unread import reset_unread
from market_chat.client.view_model import ConversationView
from market_chat.domain.value_objects.ids import is_temp_id

logger = logging.getLogger(__name__)


async def open_conversation(
    view: ConversationView,
    gateway: MessagesGateway,
    counterparty_id: str,
    *,
    sync_read_state: bool = True,
) -> bool:
    """Select a conversation and load its full history.

    A successful fetch means the owner has now seen every prior message, so the
    conversation's unread counter is zeroed locally right after the thread is
    replaced, and the server is told so unless ``sync_read_state`` is off, so a
    later directory refresh keeps the counter at zero. On failure the
    previously displayed thread stays as it was.
    """
    if view.account_id is None:
        return False

    view.selected_id = counterparty_id
    known_before = {m.id for m in view.thread(counterparty_id)}
    try:
        messages = await gateway.list_messages(view.account_id, counterparty_id, view.channel.value)
    except (TransportFailure, ServerRejection) as exc:
        logger.warning("History fetch for %s failed: %s", counterparty_id, exc.detail)
        view.history_errors[counterparty_id] = exc.detail or "Failed to fetch messages"
        return False

    confirmed_meanwhile = frozenset(
        m.id for m in view.thread(counterparty_id)
        if not m.is_pending and m.id not in known_before
    )
    view.dispatch(
        counterparty_id,
        HistoryLoaded(tuple(confirmed_message(m) for m in messages), confirmed_meanwhile),
    )
    view.history_errors.pop(counterparty_id, None)
    reset_unread(view, counterparty_id)

    if sync_read_state:
        try:
            await gateway.mark_read(view.account_id, counterparty_id, view.channel.value)
        except (TransportFailure, ServerRejection) as exc:
            logger.warning("Read-state sync for %s failed: %s", counterparty_id, exc.detail)
    return True


async def delete_message(
    view: ConversationView,
    gateway: MessagesGateway,
    counterparty_id: str,
    message_id: str,
) -> bool:
    """Soft-delete a confirmed message. Pending messages cannot be deleted."""
    if is_temp_id(message_id):
        return False
    try:
        await gateway.delete_message(message_id)
    except (TransportFailure, ServerRejection) as exc:
        logger.warning("Delete of %s failed: %s", message_id, exc.detail)
        view.push_notice(exc.detail or "Failed to delete message", counterparty_id)
        return False
    view.dispatch(counterparty_id, MessageRemoved(message_id))
    return True
