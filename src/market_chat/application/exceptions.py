from __future__ import annotations


class AppError(Exception):
    """Base application error."""

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__(detail)


class NotFoundError(AppError):
    pass


class ConflictError(AppError):
    pass


class ValidationError(AppError):
    pass


class TransportFailure(AppError):
    """Network error or timeout talking to the messages API."""


class ServerRejection(AppError):
    """Well-formed response carrying ``success: false``."""


class AttachmentRejected(AppError):
    """Candidate file failed the type / size gate; never reaches the network."""
