from __future__ import annotations

from typing import Protocol

from market_chat.domain.entities.attachment import Attachment


class AttachmentUploader(Protocol):
    """Upload transport owned outside this package.

    Must hand back a complete descriptor before the file may ride on a message.
    """

    async def upload(self, name: str, mime_type: str, data: bytes) -> Attachment: ...
