"""Async engine and session factory shared by the API and the outbox worker."""
from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from market_chat.config import Settings, settings


def build_engine(cfg: Settings) -> AsyncEngine:
    # No connection is opened until the first checkout.
    return create_async_engine(
        cfg.database_url,
        pool_size=cfg.DB_POOL_SIZE,
        max_overflow=cfg.DB_MAX_OVERFLOW,
        pool_recycle=cfg.DB_POOL_RECYCLE,
        pool_pre_ping=True,
        echo=cfg.DB_ECHO,
    )


engine = build_engine(settings)

AsyncSessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
