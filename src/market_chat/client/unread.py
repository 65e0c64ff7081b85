"""Client cache of per-conversation unread counters.

Counts come from the server; the client only ever lowers them to zero when
the owner opens a conversation.
"""
from __future__ import annotations

from dataclasses import replace

from market_chat.client.view_model import ConversationView


def reset_unread(view: ConversationView, conversation_id: str) -> None:
    entry = view.entry(conversation_id)
    if entry is None or entry.unread_count == 0:
        return
    view.replace_entry(replace(entry, unread_count=0))


def total_unread(view: ConversationView) -> int:
    return sum(max(c.unread_count, 0) for c in view.conversations)
