from __future__ import annotations

from sqlalchemy import Boolean, String, text
from sqlalchemy.orm import Mapped, mapped_column

from market_chat.infrastructure.db.base import Base


class AccountModel(Base):
    """Read-only projection of the marketplace ``accounts`` table."""

    __tablename__ = "accounts"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    image: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    online: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=text("false"))
