"""Entrypoint: python -m market_chat"""
from __future__ import annotations

import logging

import uvicorn

from market_chat.api.middleware.correlation_id import CorrelationIdFilter
from market_chat.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(correlation_id)s] %(name)s: %(message)s"


def configure_logging(level: str | int = logging.INFO) -> None:
    handler = logging.StreamHandler()
    handler.addFilter(CorrelationIdFilter())
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logging.basicConfig(level=level, handlers=[handler], force=True)
    # uvicorn's own access log duplicates AccessLogMiddleware.
    logging.getLogger("uvicorn.access").disabled = True


def main() -> None:
    configure_logging(settings.LOG_LEVEL)
    uvicorn.run(
        "market_chat.app:create_app",
        factory=True,
        host=settings.HTTP_HOST,
        port=settings.HTTP_PORT,
        log_config=None,
    )


if __name__ == "__main__":
    main()
