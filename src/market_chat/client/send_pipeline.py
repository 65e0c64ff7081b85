"""Optimistic send: Composing -> Pending -> Confirmed | Rejected.

The Pending entry is rendered before the first suspension point. Every later
step addresses the entry by (conversation id, temp id), so switching the
selected conversation mid-send cannot touch the wrong thread.
"""
from __future__ import annotations

import asyncio
import logging

from market_chat.application.dto.message import SendMessageDTO
from market_chat.application.exceptions import ServerRejection, TransportFailure
from market_chat.application.ports.clock import Clock, SystemClock
from market_chat.application.ports.messages_gateway import MessagesGateway
from market_chat.client.directory import apply_sent_message
from market_chat.client.state import (
    Confirmed,
    Delivery,
    LocalMessage,
    Pending,
    PendingAdded,
    PendingConfirmed,
    PendingRejected,
    Rejected,
    confirmed_message,
    pending_message,
)
from market_chat.client.view_model import ConversationView
from market_chat.domain.value_objects.ids import new_temp_id

logger = logging.getLogger(__name__)

SEND_FAILED = "Failed to send message. Please try again."


class SendPipeline:
    def __init__(
        self,
        gateway: MessagesGateway,
        *,
        clock: Clock | None = None,
        timeout: float | None = None,
    ) -> None:
        self._gateway = gateway
        self._clock = clock or SystemClock()
        self._timeout = timeout
        self._tasks: set[asyncio.Task[Delivery]] = set()

    def begin(self, view: ConversationView, content: str) -> tuple[str, LocalMessage] | None:
        """Render the Pending entry. Returns None when the send is a silent no-op."""
        text = content.strip()
        attachment = view.composer.attachment
        conv = view.selected
        if (not text and attachment is None) or conv is None or view.account_id is None:
            return None
        if conv.id in view.in_flight:
            return None

        pending = pending_message(
            new_temp_id(),
            view.account_id,
            conv.id,
            text,
            self._clock.now(),
            attachment=attachment,
            order_id=conv.order_id,
        )
        view.dispatch(conv.id, PendingAdded(pending))
        view.in_flight.add(conv.id)
        view.composer.draft = ""
        view.composer.attachment = None
        return conv.id, pending

    async def complete(
        self,
        view: ConversationView,
        conversation_id: str,
        pending: LocalMessage,
    ) -> Delivery:
        assert isinstance(pending.delivery, Pending)
        temp_id = pending.delivery.temp_id
        dto = SendMessageDTO(
            sender_id=pending.sender_id,
            receiver_id=pending.receiver_id,
            content=pending.content,
            channel=view.channel,
            order_id=pending.order_id,
            attachment=pending.attachment,
            client_msg_id=temp_id,
        )

        try:
            message = await asyncio.wait_for(self._gateway.send_message(dto), timeout=self._timeout)
        except TimeoutError:
            logger.warning("Send %s to %s timed out", temp_id, conversation_id)
            return self._reject(view, conversation_id, pending, SEND_FAILED)
        except TransportFailure as exc:
            logger.warning("Send %s to %s failed: %s", temp_id, conversation_id, exc.detail)
            return self._reject(view, conversation_id, pending, SEND_FAILED)
        except ServerRejection as exc:
            logger.warning("Send %s to %s rejected: %s", temp_id, conversation_id, exc.detail)
            return self._reject(view, conversation_id, pending, exc.detail or SEND_FAILED)
        except asyncio.CancelledError:
            self._reject(view, conversation_id, pending, SEND_FAILED, notify=False)
            raise
        finally:
            view.in_flight.discard(conversation_id)

        confirmed = confirmed_message(message)
        view.dispatch(conversation_id, PendingConfirmed(temp_id, confirmed))
        apply_sent_message(view, conversation_id, confirmed)
        logger.debug("Send %s confirmed as %s", temp_id, message.id)
        return Confirmed(message.id)

    async def send(self, view: ConversationView, content: str) -> Delivery | None:
        started = self.begin(view, content)
        if started is None:
            return None
        return await self.complete(view, *started)

    def submit(self, view: ConversationView, content: str) -> LocalMessage | None:
        """Fire-and-forget variant for event handlers; returns the Pending entry."""
        started = self.begin(view, content)
        if started is None:
            return None
        task = asyncio.create_task(self.complete(view, *started))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return started[1]

    async def aclose(self) -> None:
        """Cancel outstanding sends; their Pending entries are rolled back."""
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    def _reject(
        self,
        view: ConversationView,
        conversation_id: str,
        pending: LocalMessage,
        reason: str,
        *,
        notify: bool = True,
    ) -> Rejected:
        assert isinstance(pending.delivery, Pending)
        temp_id = pending.delivery.temp_id
        view.dispatch(conversation_id, PendingRejected(temp_id))
        if notify:
            view.push_notice(reason, conversation_id)
            # Hand the text back so the user can resend it by hand.
            if view.selected_id == conversation_id and not view.composer.draft:
                view.composer.draft = pending.content
                if view.composer.attachment is None:
                    view.composer.attachment = pending.attachment
        return Rejected(temp_id, reason)
