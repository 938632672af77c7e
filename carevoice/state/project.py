"""Project configuration and persisted chats (read-only views of the CRUD layer)."""

from __future__ import annotations

from typing import Any
from datetime import datetime
from dataclasses import dataclass, field

from .messages import Message, Role


@dataclass(frozen=True, slots=True)
class ReferenceDocument:
    name: str
    text: str


@dataclass(frozen=True, slots=True)
class ProjectConfig:
    id: str
    prompt: str
    llm_model: str
    contexts: tuple[ReferenceDocument, ...] = ()
    name: str = ""
    patient_info: str | None = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> ProjectConfig:
        prompt = payload.get("prompt") or {}
        content = prompt.get("content") if isinstance(prompt, dict) else prompt
        return cls(
            id=str(payload["id"]),
            name=str(payload.get("name") or ""),
            prompt=str(content or ""),
            llm_model=str(payload.get("llmModel") or ""),
            contexts=tuple(
                ReferenceDocument(name=str(c.get("name") or ""), text=str(c.get("text") or ""))
                for c in payload.get("contexts") or []
            ),
        )


@dataclass(frozen=True, slots=True)
class ChatRecord:
    id: str
    project_id: str | None = None
    messages: tuple[Message, ...] = field(default_factory=tuple)

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> ChatRecord:
        rows = []
        for row in payload.get("messages") or []:
            created = row.get("createdAt")
            kwargs: dict[str, Any] = {}
            if isinstance(created, str) and created:
                kwargs["timestamp"] = datetime.fromisoformat(created.replace("Z", "+00:00"))
            rows.append(
                Message(
                    role=Role(row.get("role", "user")),
                    content=str(row.get("content") or ""),
                    id=str(row["id"]) if row.get("id") is not None else None,
                    **kwargs,
                )
            )
        return cls(
            id=str(payload["id"]),
            project_id=payload.get("projectId"),
            messages=tuple(rows),
        )


__all__ = ["ChatRecord", "ProjectConfig", "ReferenceDocument"]
