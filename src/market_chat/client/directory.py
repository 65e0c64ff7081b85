from __future__ import annotations

import logging
from dataclasses import replace

from market_chat.application.exceptions import ServerRejection, TransportFailure
from market_chat.application.ports.messages_gateway import MessagesGateway
from market_chat.client.state import LocalMessage
from market_chat.client.view_model import ConversationEntry, ConversationView

logger = logging.getLogger(__name__)


async def load_directory(view: ConversationView, gateway: MessagesGateway) -> bool:
    """Fetch the owner's conversations and replace the cached set.

    Used both for the initial load and for user-requested refreshes. The first
    successful load selects the most recent conversation when nothing is
    selected yet. On failure the previous cache is kept and the error recorded.
    """
    if view.account_id is None:
        return False

    try:
        summaries = await gateway.list_conversations(view.account_id, view.channel.value)
    except (TransportFailure, ServerRejection) as exc:
        logger.warning("Conversation directory fetch failed: %s", exc.detail)
        view.directory_error = exc.detail or "Failed to fetch conversations"
        return False

    entries = [ConversationEntry.from_summary(s) for s in summaries]
    entries.sort(key=lambda c: c.last_message_at.timestamp() if c.last_message_at else 0.0, reverse=True)
    view.conversations = entries
    view.directory_error = None
    if view.placeholder is not None and any(c.id == view.placeholder.id for c in entries):
        view.placeholder = None

    first_load = not view.directory_loaded
    view.directory_loaded = True
    if first_load and view.selected_id is None and entries:
        view.selected_id = entries[0].id

    logger.debug("Directory loaded: %d conversations", len(entries))
    return True


def apply_sent_message(
    view: ConversationView,
    conversation_id: str,
    message: LocalMessage,
) -> None:
    """Update the cached preview after a confirmed send, without a refetch."""
    entry = view.entry(conversation_id)
    if entry is None:
        entry = ConversationEntry(id=conversation_id, counterparty_name=conversation_id)

    updated = replace(
        entry,
        last_message=message.content or ("Sent an attachment" if message.attachment else ""),
        last_message_at=message.created_at,
    )
    view.conversations = [updated, *(c for c in view.conversations if c.id != conversation_id)]
    if view.placeholder is not None and view.placeholder.id == conversation_id:
        view.placeholder = None


def search_conversations(view: ConversationView, query: str) -> list[ConversationEntry]:
    needle = query.strip().lower()
    if not needle:
        return list(view.conversations)
    return [
        c for c in view.conversations
        if needle in c.counterparty_name.lower() or needle in (c.subject or "").lower()
    ]
