from __future__ import annotations

import json
from datetime import datetime
from typing import Any


def _default(o: object) -> Any:
    if isinstance(o, datetime):
        return o.isoformat()
    raise TypeError(f"Object of type {type(o).__name__} is not JSON serializable")


def serialize_event(event_type: str, payload: dict[str, Any]) -> str:
    """Wire envelope understood by the notification service."""
    return json.dumps({"event": event_type, "data": payload}, default=_default)
