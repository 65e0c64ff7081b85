"""Mount/unmount lifecycle for the messaging view.

``MessagingSession`` owns one ``ConversationView`` for as long as the view is
mounted and routes user actions to the directory, history, send pipeline and
attachment gate.
"""
from __future__ import annotations

import logging
from types import TracebackType
from typing import Self

from market_chat.application.exceptions import AttachmentRejected
from market_chat.application.ports.clock import Clock
from market_chat.application.ports.messages_gateway import MessagesGateway
from market_chat.application.ports.uploads import AttachmentUploader
from market_chat.client import directory, history
from market_chat.client.attachment_gate import AttachmentCandidate, AttachmentPolicy, attach
from market_chat.client.send_pipeline import SendPipeline
from market_chat.client.state import Delivery, LocalMessage
from market_chat.client.unread import total_unread
from market_chat.client.view_model import ConversationEntry, ConversationView
from market_chat.config import settings
from market_chat.domain.entities.attachment import Attachment
from market_chat.domain.value_objects.enums import Channel

logger = logging.getLogger(__name__)


class MessagingSession:
    def __init__(
        self,
        gateway: MessagesGateway,
        account_id: str | None,
        *,
        channel: Channel | None = None,
        uploader: AttachmentUploader | None = None,
        policy: AttachmentPolicy | None = None,
        clock: Clock | None = None,
        send_timeout: float | None = None,
        sync_read_state: bool | None = None,
    ) -> None:
        self.view = ConversationView(
            account_id=account_id,
            channel=channel or Channel(settings.DEFAULT_CHANNEL),
        )
        self._gateway = gateway
        self._uploader = uploader
        self._policy = policy or AttachmentPolicy.from_settings()
        self._sync_read_state = (
            settings.SYNC_READ_STATE if sync_read_state is None else sync_read_state
        )
        self._pipeline = SendPipeline(
            gateway,
            clock=clock,
            timeout=settings.CLIENT_SEND_TIMEOUT if send_timeout is None else send_timeout,
        )

    async def mount(self, preselect: str | None = None) -> ConversationView:
        """Load the directory and open the selected (or most recent) conversation."""
        if preselect is not None:
            self.view.selected_id = preselect
        loaded = await directory.load_directory(self.view, self._gateway)
        if loaded and self.view.selected_id is not None:
            if self.view.entry(self.view.selected_id) is None:
                logger.info("Preselected conversation %s not in directory", self.view.selected_id)
                self.view.selected_id = self.view.conversations[0].id if self.view.conversations else None
            if self.view.selected_id is not None:
                await self.select(self.view.selected_id)
        return self.view

    async def unmount(self) -> None:
        await self._pipeline.aclose()
        self.view.mounted = False

    async def __aenter__(self) -> Self:
        await self.mount()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.unmount()

    async def refresh(self) -> bool:
        return await directory.load_directory(self.view, self._gateway)

    async def select(self, counterparty_id: str, counterparty_name: str | None = None) -> bool:
        """Open a conversation; an id not in the directory starts a new one."""
        if self.view.entry(counterparty_id) is None:
            self.start_conversation(counterparty_id, counterparty_name or counterparty_id)
        return await history.open_conversation(
            self.view,
            self._gateway,
            counterparty_id,
            sync_read_state=self._sync_read_state,
        )

    def start_conversation(
        self,
        counterparty_id: str,
        counterparty_name: str,
        *,
        avatar: str | None = None,
        subject: str | None = None,
        order_id: str | None = None,
    ) -> ConversationEntry:
        """Select a counterparty with no message history yet."""
        existing = self.view.entry(counterparty_id)
        if existing is not None:
            self.view.selected_id = existing.id
            return existing
        placeholder = ConversationEntry(
            id=counterparty_id,
            counterparty_name=counterparty_name,
            counterparty_avatar=avatar,
            subject=subject,
            order_id=order_id,
        )
        self.view.placeholder = placeholder
        self.view.selected_id = counterparty_id
        self.view.threads.setdefault(counterparty_id, ())
        return placeholder

    async def send(self, content: str) -> Delivery | None:
        return await self._pipeline.send(self.view, content)

    def submit(self, content: str) -> LocalMessage | None:
        return self._pipeline.submit(self.view, content)

    async def attach(self, candidate: AttachmentCandidate) -> Attachment:
        if self._uploader is None:
            self.view.composer.error = "Attachments are not available yet"
            raise AttachmentRejected(self.view.composer.error)
        return await attach(self.view, candidate, self._uploader, self._policy)

    async def delete_message(self, message_id: str) -> bool:
        if self.view.selected_id is None:
            return False
        return await history.delete_message(
            self.view, self._gateway, self.view.selected_id, message_id,
        )

    def search(self, query: str) -> list[ConversationEntry]:
        return directory.search_conversations(self.view, query)

    @property
    def unread_total(self) -> int:
        return total_unread(self.view)

    def dismiss_notice(self, notice_id: int) -> None:
        self.view.dismiss_notice(notice_id)
