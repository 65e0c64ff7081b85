"""State of one mounted conversation view.

The view-model is created when the messaging view mounts and discarded when
it unmounts. Components never keep state of their own; they receive the view
and mutate it.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from market_chat.client.state import LocalMessage, ThreadAction, reduce_thread
from market_chat.domain.entities.attachment import Attachment
from market_chat.domain.entities.conversation import ConversationSummary
from market_chat.domain.value_objects.enums import Channel


@dataclass(frozen=True, slots=True)
class ConversationEntry:
    """Directory row as cached by the client."""

    id: str
    counterparty_name: str
    counterparty_avatar: str | None = None
    subject: str | None = None
    order_id: str | None = None
    last_message: str = ""
    last_message_at: datetime | None = None
    unread_count: int = 0
    online: bool = False

    @classmethod
    def from_summary(cls, summary: ConversationSummary) -> ConversationEntry:
        return cls(
            id=summary.id,
            counterparty_name=summary.counterparty_name,
            counterparty_avatar=summary.counterparty_avatar,
            subject=summary.subject,
            order_id=summary.order_id,
            last_message=summary.last_message,
            last_message_at=summary.last_message_at,
            unread_count=max(summary.unread_count, 0),
            online=summary.online,
        )


@dataclass(frozen=True, slots=True)
class Notice:
    id: int
    text: str
    conversation_id: str | None = None


@dataclass(slots=True)
class Composer:
    draft: str = ""
    attachment: Attachment | None = None
    error: str | None = None


@dataclass(slots=True)
class ConversationView:
    account_id: str | None
    channel: Channel = Channel.PRODUCT

    conversations: list[ConversationEntry] = field(default_factory=list)
    directory_loaded: bool = False
    directory_error: str | None = None
    # Counterparty picked before any message exists (not yet in the directory).
    placeholder: ConversationEntry | None = None

    selected_id: str | None = None
    threads: dict[str, tuple[LocalMessage, ...]] = field(default_factory=dict)
    history_errors: dict[str, str] = field(default_factory=dict)

    in_flight: set[str] = field(default_factory=set)
    composer: Composer = field(default_factory=Composer)
    notices: list[Notice] = field(default_factory=list)
    mounted: bool = True
    _notice_seq: int = 0

    def entry(self, conversation_id: str) -> ConversationEntry | None:
        for conv in self.conversations:
            if conv.id == conversation_id:
                return conv
        if self.placeholder is not None and self.placeholder.id == conversation_id:
            return self.placeholder
        return None

    def replace_entry(self, updated: ConversationEntry) -> None:
        self.conversations = [updated if c.id == updated.id else c for c in self.conversations]

    @property
    def selected(self) -> ConversationEntry | None:
        if self.selected_id is None:
            return None
        return self.entry(self.selected_id)

    @property
    def displayed(self) -> tuple[LocalMessage, ...]:
        if self.selected_id is None:
            return ()
        return self.threads.get(self.selected_id, ())

    def thread(self, conversation_id: str) -> tuple[LocalMessage, ...]:
        return self.threads.get(conversation_id, ())

    def dispatch(self, conversation_id: str, action: ThreadAction) -> tuple[LocalMessage, ...]:
        """Apply ``action`` to one conversation's thread, whether or not it is on screen."""
        thread = reduce_thread(self.threads.get(conversation_id, ()), action)
        self.threads[conversation_id] = thread
        return thread

    def can_compose(self, conversation_id: str | None = None) -> bool:
        """False while a send for the conversation is in flight (composer disabled)."""
        target = conversation_id or self.selected_id
        return target is not None and target not in self.in_flight

    def push_notice(self, text: str, conversation_id: str | None = None) -> Notice:
        self._notice_seq += 1
        notice = Notice(id=self._notice_seq, text=text, conversation_id=conversation_id)
        self.notices.append(notice)
        return notice

    def dismiss_notice(self, notice_id: int) -> None:
        self.notices = [n for n in self.notices if n.id != notice_id]
