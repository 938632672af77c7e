"""Runtime settings (dataclasses only)."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ApiSettings:
    base_url: str
    timeout_s: float


@dataclass(frozen=True, slots=True)
class OpenAISettings:
    realtime_url: str
    client_secrets_url: str
    model: str | None
    voice: str
    transcription_model: str
    connect_timeout_s: float
    sample_rate_hz: int


@dataclass(frozen=True, slots=True)
class SarvamSettings:
    ws_url: str
    org_id: str
    workspace_id: str
    app_id: str
    version: int | None
    user_identifier: str
    connect_timeout_s: float
    sample_rate_hz: int


@dataclass(frozen=True, slots=True)
class VoiceSettings:
    default_provider: str
    provider_cache_s: float
    openai: OpenAISettings
    sarvam: SarvamSettings


@dataclass(frozen=True, slots=True)
class SessionSettings:
    context_limit: int
    token_budget_ratio: float
    tokenizer_encoding: str
    text_send_grace_s: float


@dataclass(frozen=True, slots=True)
class AppSettings:
    api: ApiSettings
    voice: VoiceSettings
    session: SessionSettings


__all__ = [
    "ApiSettings",
    "AppSettings",
    "OpenAISettings",
    "SarvamSettings",
    "SessionSettings",
    "VoiceSettings",
]
