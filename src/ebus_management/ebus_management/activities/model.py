from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Activity:
    id: str
    type: str
    description: str
    timestamp: str
    user_id: Optional[str] = None

    def to_record(self) -> dict:
        return {
            "id": self.id,
            "type": self.type,
            "description": self.description,
            "timestamp": self.timestamp,
            "userId": self.user_id,
        }

    @classmethod
    def from_record(cls, data: dict) -> "Activity":
        return cls(
            id=str(data["id"]),
            type=data.get("type") or "",
            description=data.get("description") or "",
            timestamp=data.get("timestamp") or "",
            user_id=data.get("userId"),
        )
