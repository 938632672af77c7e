from __future__ import annotations

import sys
import asyncio
from pathlib import Path
from typing import Any

import pytest


def pytest_configure() -> None:
    # Keep `import carevoice...` working when running `pytest` from the repo root.
    repo_root = Path(__file__).resolve().parents[1]
    repo_root_str = str(repo_root)
    if repo_root_str not in sys.path:
        sys.path.insert(0, repo_root_str)


class FakeSocket:
    """In-memory stand-in for a websockets client connection.

    `replies` maps an outbound message type to the events pushed back when
    that message is sent.
    """

    def __init__(self, replies: dict[str, list[dict[str, Any]]] | None = None) -> None:
        import orjson

        self._orjson = orjson
        self.replies = replies or {}
        self.sent: list[dict[str, Any]] = []
        self.closed = False
        self._inbox: asyncio.Queue[bytes | None] = asyncio.Queue()

    async def send(self, data: str) -> None:
        if self.closed:
            raise RuntimeError("socket closed")
        message = self._orjson.loads(data)
        self.sent.append(message)
        for event in self.replies.get(message.get("type"), []):
            self.push(event)

    def push(self, event: dict[str, Any]) -> None:
        self._inbox.put_nowait(self._orjson.dumps(event))

    def end(self) -> None:
        self._inbox.put_nowait(None)

    async def close(self) -> None:
        if not self.closed:
            self.closed = True
            self._inbox.put_nowait(None)

    def sent_types(self) -> list[str]:
        return [m.get("type") for m in self.sent]

    def __aiter__(self) -> FakeSocket:
        return self

    async def __anext__(self) -> bytes:
        item = await self._inbox.get()
        if item is None:
            raise StopAsyncIteration
        return item


class FakeCredentials:
    def __init__(self, *, token: str = "ek_test", configured: bool = True, provider: str | None = None) -> None:
        self.token = token
        self.configured = configured
        self.provider = provider
        self.provider_calls = 0
        self.error: Exception | None = None

    async def fetch_realtime_token(self) -> str:
        if self.error is not None:
            raise self.error
        return self.token

    async def fetch_sarvam_configured(self) -> bool:
        if self.error is not None:
            raise self.error
        return self.configured

    async def fetch_voice_provider(self) -> str | None:
        self.provider_calls += 1
        if self.error is not None:
            raise self.error
        return self.provider


class Recorder:
    """Records every callback as (name, args) in arrival order."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple[Any, ...]]] = []

    def callbacks(self):
        from carevoice.realtime.callbacks import VoiceEngineCallbacks

        names = [
            "on_connected",
            "on_disconnected",
            "on_error",
            "on_user_speech_start",
            "on_user_speech_end",
            "on_user_transcript",
            "on_assistant_transcript_delta",
            "on_assistant_transcript_done",
            "on_assistant_speaking_start",
            "on_assistant_speaking_end",
            "on_response_complete",
        ]
        return VoiceEngineCallbacks(**{name: self._recorder(name) for name in names})

    def _recorder(self, name: str):
        def record(*args: Any) -> None:
            self.calls.append((name, args))

        return record

    def names(self) -> list[str]:
        return [name for name, _ in self.calls]

    def of(self, name: str) -> list[tuple[Any, ...]]:
        return [args for call, args in self.calls if call == name]


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def fake_credentials() -> FakeCredentials:
    return FakeCredentials()


@pytest.fixture
def make_socket():
    def factory(replies: dict[str, list[dict[str, Any]]] | None = None) -> FakeSocket:
        return FakeSocket(replies)

    return factory


@pytest.fixture
def connector():
    """Build a `connect_fn` that hands out one prepared socket and records the call."""

    def factory(socket: FakeSocket, gate: asyncio.Event | None = None):
        calls: list[dict[str, Any]] = []

        async def connect_fn(url: str, **kwargs: Any) -> FakeSocket:
            calls.append({"url": url, **kwargs})
            if gate is not None:
                await gate.wait()
            return socket

        connect_fn.calls = calls  # type: ignore[attr-defined]
        return connect_fn

    return factory


@pytest.fixture
def openai_settings():
    from carevoice.state.settings import OpenAISettings

    return OpenAISettings(
        realtime_url="wss://realtime.test/v1/realtime",
        client_secrets_url="https://realtime.test/v1/realtime/client_secrets",
        model="gpt-realtime-2025-08-28",
        voice="shimmer",
        transcription_model="whisper-1",
        connect_timeout_s=1.0,
        sample_rate_hz=24000,
    )


@pytest.fixture
def sarvam_settings():
    from carevoice.state.settings import SarvamSettings

    return SarvamSettings(
        ws_url="wss://sarvam.test/ws",
        org_id="org",
        workspace_id="ws",
        app_id="app",
        version=3,
        user_identifier="care-admin@care.org",
        connect_timeout_s=1.0,
        sample_rate_hz=16000,
    )


@pytest.fixture
def app_settings(openai_settings, sarvam_settings):
    from carevoice.state.settings import ApiSettings, AppSettings, VoiceSettings, SessionSettings

    return AppSettings(
        api=ApiSettings(base_url="http://app.test", timeout_s=1.0),
        voice=VoiceSettings(
            default_provider="openai",
            provider_cache_s=300.0,
            openai=openai_settings,
            sarvam=sarvam_settings,
        ),
        session=SessionSettings(
            context_limit=32_000,
            token_budget_ratio=0.9,
            tokenizer_encoding="cl100k_base",
            text_send_grace_s=0.0,
        ),
    )
