from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text

from market_chat.infrastructure.db.session import AsyncSessionLocal

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


async def _check_database() -> str:
    async with AsyncSessionLocal() as session:
        await session.execute(text("SELECT 1"))
    return "ok"


async def _check_redis(request: Request) -> str:
    redis = getattr(request.app.state, "redis", None)
    if redis is None:
        return "not configured"
    await redis.ping()
    return "ok"


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    """Liveness: the process is serving requests."""
    return {"status": "ok"}


@router.get("/readyz")
async def readyz(request: Request) -> JSONResponse:
    """Readiness: Postgres and Redis both answer."""
    checks: dict[str, str] = {}
    ready = True
    for name, check in (("postgres", _check_database()), ("redis", _check_redis(request))):
        try:
            checks[name] = await check
        except Exception as exc:  # noqa: BLE001
            logger.warning("Readiness check %s failed: %r", name, exc)
            checks[name] = f"error: {exc}"
            ready = False

    return JSONResponse(
        status_code=200 if ready else 503,
        content={"status": "ready" if ready else "unavailable", "checks": checks},
    )
