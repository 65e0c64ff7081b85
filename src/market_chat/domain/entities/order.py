from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class OrderRef:
    id: str
    order_number: str
    title: str | None
