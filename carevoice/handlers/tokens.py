"""Ephemeral OpenAI realtime client secrets."""

from __future__ import annotations

import logging

import httpx
import orjson

from carevoice.errors import CredentialsError
from carevoice.config.secrets import get_openai_api_key
from carevoice.state.settings import OpenAISettings

logger = logging.getLogger(__name__)


async def mint_realtime_token(client: httpx.AsyncClient, settings: OpenAISettings) -> str:
    api_key = get_openai_api_key()
    if not api_key:
        raise CredentialsError(provider="openai", message="OpenAI API key is not configured")

    session: dict[str, str] = {"type": "realtime"}
    if settings.model:
        session["model"] = settings.model
    try:
        response = await client.post(
            settings.client_secrets_url,
            content=orjson.dumps({"session": session}),
            headers={"Authorization": f"Bearer {api_key}", "Content-Type": "application/json"},
        )
        response.raise_for_status()
        data = orjson.loads(response.content)
    except (httpx.HTTPError, orjson.JSONDecodeError) as exc:
        logger.warning("client secret request failed: %s", exc)
        raise CredentialsError(provider="openai", message="Failed to create realtime token") from exc

    value = data.get("value") if isinstance(data, dict) else None
    if not isinstance(value, str) or not value:
        secret = data.get("client_secret") if isinstance(data, dict) else None
        value = secret.get("value") if isinstance(secret, dict) else None
    if not isinstance(value, str) or not value:
        raise CredentialsError(provider="openai", message="Realtime token response has no value")
    return value


__all__ = ["mint_realtime_token"]
