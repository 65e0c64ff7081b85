"""Redis Pub/Sub publisher feeding the notification collaborator."""
from __future__ import annotations

import logging
from typing import Any

import redis.asyncio as aioredis

from market_chat.infrastructure.bus.serializer import serialize_event

logger = logging.getLogger(__name__)


class RedisPubSubPublisher:
    """Implements application.ports.bus.EventPublisher."""

    def __init__(self, redis: aioredis.Redis) -> None:
        self._redis = redis

    async def publish(self, channel: str, payload: dict[str, Any]) -> None:
        event_type = payload.get("event_type", "unknown")
        receivers = await self._redis.publish(channel, serialize_event(event_type, payload))
        logger.debug("Published %s to %s (%d receivers)", event_type, channel, receivers)
