from __future__ import annotations

import httpx
import pytest

from carevoice.errors import CredentialsError
from carevoice.realtime.credentials import CredentialsClient


def _client(handler) -> CredentialsClient:
    transport = httpx.MockTransport(handler)
    return CredentialsClient(client=httpx.AsyncClient(transport=transport, base_url="http://app.test"))


@pytest.mark.asyncio
async def test_fetch_realtime_token() -> None:
    seen: list[tuple[str, str]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.method, request.url.path))
        return httpx.Response(200, json={"token": "ek_123"})

    client = _client(handler)
    assert await client.fetch_realtime_token() == "ek_123"
    assert seen == [("POST", "/api/realtime/token")]


@pytest.mark.asyncio
async def test_token_failure_raises_credentials_error() -> None:
    client = _client(lambda request: httpx.Response(500, json={"error": "boom"}))
    with pytest.raises(CredentialsError, match="Failed to get token"):
        await client.fetch_realtime_token()


@pytest.mark.asyncio
async def test_token_missing_from_body_raises() -> None:
    client = _client(lambda request: httpx.Response(200, json={}))
    with pytest.raises(CredentialsError):
        await client.fetch_realtime_token()


@pytest.mark.asyncio
async def test_fetch_sarvam_configured() -> None:
    client = _client(lambda request: httpx.Response(200, json={"configured": True}))
    assert await client.fetch_sarvam_configured() is True

    client = _client(lambda request: httpx.Response(404))
    with pytest.raises(CredentialsError, match="Failed to get Sarvam configuration"):
        await client.fetch_sarvam_configured()


@pytest.mark.asyncio
async def test_fetch_voice_provider() -> None:
    client = _client(lambda request: httpx.Response(200, json={"provider": " Sarvam "}))
    assert await client.fetch_voice_provider() == "sarvam"

    client = _client(lambda request: httpx.Response(200, json={}))
    assert await client.fetch_voice_provider() is None
