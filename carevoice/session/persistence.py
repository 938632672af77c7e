"""Client for the chat CRUD endpoints."""

from __future__ import annotations

import logging
from typing import Any

import httpx
import orjson

from carevoice.errors import PersistenceError
from carevoice.state.messages import Role
from carevoice.config.api import CHATS_PATH, APP_BASE_URL, HTTP_TIMEOUT_S, CHAT_MESSAGES_PATH

logger = logging.getLogger(__name__)


class ChatStore:
    def __init__(
        self,
        *,
        base_url: str = APP_BASE_URL,
        timeout_s: float = HTTP_TIMEOUT_S,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout_s)

    async def _post(self, operation: str, path: str, body: dict[str, Any]) -> dict[str, Any]:
        try:
            response = await self._client.post(
                path,
                content=orjson.dumps(body),
                headers={"Content-Type": "application/json"},
            )
            response.raise_for_status()
            data = orjson.loads(response.content) if response.content else {}
        except (httpx.HTTPError, orjson.JSONDecodeError) as exc:
            raise PersistenceError(operation=operation, message=str(exc) or type(exc).__name__) from exc
        if not isinstance(data, dict):
            raise PersistenceError(operation=operation, message="unexpected response body")
        return data

    async def create_chat(self, project_id: str) -> str:
        data = await self._post("create_chat", CHATS_PATH, {"projectId": project_id})
        chat_id = data.get("id")
        if chat_id is None or not str(chat_id):
            raise PersistenceError(operation="create_chat", message="response has no chat id")
        logger.info("created chat %s for project %s", chat_id, project_id)
        return str(chat_id)

    async def save_message(self, chat_id: str, role: Role | str, content: str) -> dict[str, Any]:
        role_value = role.value if isinstance(role, Role) else str(role)
        return await self._post(
            "save_message",
            CHAT_MESSAGES_PATH,
            {"chatId": chat_id, "role": role_value, "content": content, "contextIds": []},
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()


__all__ = ["ChatStore"]
