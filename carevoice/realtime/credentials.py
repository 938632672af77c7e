"""Out-of-band credential exchange with the web app."""

from __future__ import annotations

import logging
from typing import Any

import httpx
import orjson

from carevoice.errors import CredentialsError
from carevoice.config.api import (
    HTTP_TIMEOUT_S,
    APP_BASE_URL,
    SARVAM_CONFIG_PATH,
    REALTIME_TOKEN_PATH,
    VOICE_PROVIDER_PATH,
)

logger = logging.getLogger(__name__)


class CredentialsClient:
    """Fetch short-lived tokens and provider configuration from the web app."""

    def __init__(
        self,
        *,
        base_url: str = APP_BASE_URL,
        timeout_s: float = HTTP_TIMEOUT_S,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout_s)

    async def _get_json(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        response = await self._client.request(method, path, **kwargs)
        response.raise_for_status()
        data = orjson.loads(response.content)
        if not isinstance(data, dict):
            raise ValueError(f"{path} returned {type(data).__name__}, expected an object")
        return data

    async def fetch_realtime_token(self) -> str:
        try:
            data = await self._get_json("POST", REALTIME_TOKEN_PATH, json={})
        except Exception as exc:
            logger.warning("realtime token request failed: %s", exc)
            raise CredentialsError(provider="openai", message="Failed to get token") from exc
        token = data.get("token") or data.get("value")
        if not isinstance(token, str) or not token.strip():
            raise CredentialsError(provider="openai", message="Failed to get token")
        return token.strip()

    async def fetch_sarvam_configured(self) -> bool:
        try:
            data = await self._get_json("GET", SARVAM_CONFIG_PATH)
        except Exception as exc:
            logger.warning("sarvam config request failed: %s", exc)
            raise CredentialsError(provider="sarvam", message="Failed to get Sarvam configuration") from exc
        return bool(data.get("configured"))

    async def fetch_voice_provider(self) -> str | None:
        data = await self._get_json("GET", VOICE_PROVIDER_PATH)
        provider = data.get("provider")
        if isinstance(provider, str) and provider.strip():
            return provider.strip().lower()
        return None

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()


__all__ = ["CredentialsClient"]
