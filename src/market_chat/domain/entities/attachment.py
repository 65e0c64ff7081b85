from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Attachment:
    url: str
    name: str
    type: str
    size: int

    def to_dict(self) -> dict[str, Any]:
        return {"url": self.url, "name": self.name, "type": self.type, "size": self.size}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Attachment:
        return cls(
            url=data["url"],
            name=data["name"],
            type=data["type"],
            size=int(data["size"]),
        )
