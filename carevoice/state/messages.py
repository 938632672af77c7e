"""Conversation messages as shown to the learner."""

from __future__ import annotations

from enum import Enum
from datetime import datetime, timezone
from dataclasses import dataclass, field, replace


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class Message:
    role: Role
    content: str
    id: str | None = None
    timestamp: datetime = field(default_factory=_utcnow)

    def with_content(self, content: str) -> Message:
        return replace(self, content=content)

    def render(self) -> str:
        return f"{self.role.value}: {self.content}"


__all__ = ["Message", "Role"]
