from __future__ import annotations

import logging

import pytest

from carevoice.config import models
from carevoice.realtime.factory import create_voice_engine
from carevoice.realtime.resolver import ProviderResolver
from carevoice.realtime.providers import VoiceProvider, provider_for_model
from carevoice.realtime.sarvam_engine import SarvamVoiceEngine
from carevoice.realtime.openai_engine import OpenAIVoiceEngine


def test_unknown_model_falls_back_with_warning(caplog) -> None:
    with caplog.at_level(logging.WARNING):
        provider = provider_for_model("acme:does-not-exist", VoiceProvider.SARVAM)
    assert provider is VoiceProvider.SARVAM
    assert "unknown model" in caplog.text


def test_model_without_pin_uses_default() -> None:
    assert provider_for_model("openai:gpt-realtime-2025-08-28", VoiceProvider.OPENAI) is VoiceProvider.OPENAI
    assert provider_for_model(None, VoiceProvider.SARVAM) is VoiceProvider.SARVAM


def test_model_pin_wins_over_default(monkeypatch) -> None:
    monkeypatch.setitem(
        models.LLMS,
        "sarvam:bulbul",
        {"name": "Bulbul", "realtime": False, "voice_provider": "sarvam"},
    )
    assert provider_for_model("sarvam:bulbul", VoiceProvider.OPENAI) is VoiceProvider.SARVAM


def test_invalid_pin_falls_back(monkeypatch) -> None:
    monkeypatch.setitem(models.LLMS, "x:y", {"name": "X", "voice_provider": "acme"})
    assert provider_for_model("x:y", VoiceProvider.OPENAI) is VoiceProvider.OPENAI


@pytest.mark.asyncio
async def test_resolver_caches_for_ttl(fake_credentials) -> None:
    now = 0.0

    def clock() -> float:
        return now

    fake_credentials.provider = "sarvam"
    resolver = ProviderResolver(fake_credentials, default=VoiceProvider.OPENAI, cache_s=300, clock=clock)

    assert await resolver.resolve() is VoiceProvider.SARVAM
    fake_credentials.provider = "openai"
    now = 299.0
    assert await resolver.resolve() is VoiceProvider.SARVAM
    assert fake_credentials.provider_calls == 1

    now = 301.0
    assert await resolver.resolve() is VoiceProvider.OPENAI
    assert fake_credentials.provider_calls == 2


@pytest.mark.asyncio
async def test_resolver_falls_back_to_default_on_failure(fake_credentials) -> None:
    fake_credentials.error = RuntimeError("app down")
    resolver = ProviderResolver(fake_credentials, default=VoiceProvider.SARVAM, cache_s=300)
    assert await resolver.resolve() is VoiceProvider.SARVAM

    fake_credentials.error = None
    fake_credentials.provider = "nonsense"
    resolver.invalidate()
    assert await resolver.resolve() is VoiceProvider.SARVAM


@pytest.mark.asyncio
async def test_factory_builds_adapter_for_resolved_provider(recorder, fake_credentials, app_settings) -> None:
    engine = await create_voice_engine(
        recorder.callbacks(),
        "openai:gpt-realtime-2025-08-28",
        settings=app_settings.voice,
        credentials=fake_credentials,
    )
    assert isinstance(engine, OpenAIVoiceEngine)

    fake_credentials.provider = "sarvam"
    resolver = ProviderResolver(fake_credentials, default=VoiceProvider.OPENAI, cache_s=300)
    engine = await create_voice_engine(
        recorder.callbacks(),
        "openai:gpt-realtime-2025-08-28",
        settings=app_settings.voice,
        credentials=fake_credentials,
        resolver=resolver,
    )
    assert isinstance(engine, SarvamVoiceEngine)


@pytest.mark.asyncio
async def test_factory_never_fails_on_unknown_model(recorder, fake_credentials, app_settings) -> None:
    engine = await create_voice_engine(
        recorder.callbacks(),
        "acme:unknown",
        settings=app_settings.voice,
        credentials=fake_credentials,
    )
    assert isinstance(engine, OpenAIVoiceEngine)
