"""httpx implementation of the MessagesGateway port."""
from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError as SchemaError

from market_chat.api.v1.schemas.conversation import ConversationListResponse
from market_chat.api.v1.schemas.message import (
    MarkReadResponse,
    MessageListResponse,
    SendMessageResponse,
)
from market_chat.application.dto.message import SendMessageDTO
from market_chat.application.exceptions import ServerRejection, TransportFailure
from market_chat.config import settings
from market_chat.domain.entities.conversation import ConversationSummary
from market_chat.domain.entities.message import Message

logger = logging.getLogger(__name__)


class HttpMessagesGateway:
    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    @classmethod
    def from_settings(cls) -> HttpMessagesGateway:
        return cls(
            httpx.AsyncClient(
                base_url=settings.API_BASE_URL,
                timeout=settings.CLIENT_REQUEST_TIMEOUT,
            )
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def list_conversations(self, owner_id: str, channel: str) -> list[ConversationSummary]:
        data = await self._request("GET", "/messages", params={"ownerId": owner_id, "channel": channel})
        envelope = self._parse(ConversationListResponse, data)
        return [c.to_entity() for c in envelope.conversations]

    async def list_messages(
        self, owner_id: str, counterparty_id: str, channel: str,
    ) -> list[Message]:
        data = await self._request(
            "GET",
            "/messages",
            params={"ownerId": owner_id, "counterpartyId": counterparty_id, "channel": channel},
        )
        envelope = self._parse(MessageListResponse, data)
        return [m.to_entity() for m in envelope.messages]

    async def send_message(self, dto: SendMessageDTO) -> Message:
        body: dict[str, Any] = {
            "senderId": dto.sender_id,
            "receiverId": dto.receiver_id,
            "content": dto.content,
            "channel": dto.channel.value,
        }
        if dto.order_id:
            body["orderId"] = dto.order_id
        if dto.attachment:
            body["attachment"] = dto.attachment.to_dict()
        if dto.client_msg_id:
            body["clientMsgId"] = dto.client_msg_id
        data = await self._request("POST", "/messages", json=body)
        return self._parse(SendMessageResponse, data).message.to_entity()

    async def mark_read(self, owner_id: str, counterparty_id: str, channel: str) -> int:
        data = await self._request(
            "POST",
            "/messages/read",
            json={"ownerId": owner_id, "counterpartyId": counterparty_id, "channel": channel},
        )
        return self._parse(MarkReadResponse, data).updated

    async def delete_message(self, message_id: str) -> None:
        await self._request("DELETE", "/messages", params={"messageId": message_id})

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        try:
            resp = await self._client.request(method, path, params=params, json=json)
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %r", method, path, exc)
            raise TransportFailure(str(exc) or type(exc).__name__) from exc

        try:
            data = resp.json()
        except ValueError as exc:
            raise TransportFailure(f"Unexpected response from server ({resp.status_code})") from exc

        if not isinstance(data, dict) or not data.get("success"):
            reason = data.get("message") if isinstance(data, dict) else None
            logger.info("%s %s rejected (%s): %s", method, path, resp.status_code, reason)
            raise ServerRejection(reason if isinstance(reason, str) else f"HTTP {resp.status_code}")
        return data

    @staticmethod
    def _parse(model: type, data: dict[str, Any]) -> Any:
        try:
            return model.model_validate(data)
        except SchemaError as exc:
            raise TransportFailure("Malformed response from server") from exc
