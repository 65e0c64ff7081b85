from __future__ import annotations

from enum import StrEnum


class Channel(StrEnum):
    """Marketplace surface a conversation belongs to."""

    PRODUCT = "product"
    SERVICE = "service"
    JOB = "job"


class MessageRole(StrEnum):
    SELF = "self"
    COUNTERPARTY = "counterparty"


class DeliveryStatus(StrEnum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    REJECTED = "rejected"


class OutboxStatus(StrEnum):
    PENDING = "pending"
    PROCESSING = "processing"
    SENT = "sent"
    FAILED = "failed"
