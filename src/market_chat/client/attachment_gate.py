from __future__ import annotations

import logging
from dataclasses import dataclass

from market_chat.application.exceptions import AppError, AttachmentRejected
from market_chat.application.ports.uploads import AttachmentUploader
from market_chat.client.view_model import ConversationView
from market_chat.config import settings
from market_chat.domain.entities.attachment import Attachment

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AttachmentPolicy:
    allowed_types: frozenset[str]
    max_bytes: int

    @classmethod
    def from_settings(cls) -> AttachmentPolicy:
        return cls(
            allowed_types=frozenset(t.lower() for t in settings.ATTACHMENT_ALLOWED_TYPES),
            max_bytes=settings.ATTACHMENT_MAX_BYTES,
        )

    def allows_type(self, mime_type: str) -> bool:
        mime = mime_type.lower()
        if mime in self.allowed_types:
            return True
        major = mime.split("/", 1)[0]
        return f"{major}/*" in self.allowed_types


@dataclass(frozen=True, slots=True)
class AttachmentCandidate:
    name: str
    mime_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


def check_attachment(candidate: AttachmentCandidate, policy: AttachmentPolicy) -> None:
    if candidate.size == 0:
        raise AttachmentRejected("File is empty")
    if not policy.allows_type(candidate.mime_type):
        raise AttachmentRejected(f"File type {candidate.mime_type or 'unknown'} is not allowed")
    if candidate.size > policy.max_bytes:
        limit_mb = policy.max_bytes // (1024 * 1024)
        raise AttachmentRejected(f"File size exceeds {limit_mb}MB limit")


async def attach(
    view: ConversationView,
    candidate: AttachmentCandidate,
    uploader: AttachmentUploader,
    policy: AttachmentPolicy,
) -> Attachment:
    """Validate, upload, and queue a file on the composer.

    The gate runs before the first suspension point, so a rejected file is
    reported to the composer synchronously and never reaches the network.
    """
    try:
        check_attachment(candidate, policy)
    except AttachmentRejected as exc:
        view.composer.error = exc.detail
        raise

    try:
        attachment = await uploader.upload(candidate.name, candidate.mime_type, candidate.data)
    except AppError as exc:
        logger.warning("Upload of %s failed: %s", candidate.name, exc.detail)
        view.composer.error = exc.detail or "Upload failed"
        raise

    view.composer.attachment = attachment
    view.composer.error = None
    return attachment
