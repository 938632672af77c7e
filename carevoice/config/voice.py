"""Realtime voice provider configuration (env-resolved constants only)."""

from __future__ import annotations

import os

_PROVIDERS = {"openai", "sarvam"}


def _get_float(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return float(default)
    try:
        return float(raw)
    except Exception:
        return float(default)


def _get_optional_int(name: str) -> int | None:
    raw = (os.getenv(name) or "").strip()
    if not raw or raw.lower() == "latest":
        return None
    try:
        return int(raw)
    except Exception:
        return None


# Global default; the admin settings endpoint can override it at runtime.
_VOICE_PROVIDER_RAW = (os.getenv("VOICE_PROVIDER") or "").strip().lower()
VOICE_PROVIDER: str = _VOICE_PROVIDER_RAW if _VOICE_PROVIDER_RAW in _PROVIDERS else "openai"

# How long a provider lookup from the settings endpoint stays valid.
VOICE_PROVIDER_CACHE_S: float = max(0.0, _get_float("VOICE_PROVIDER_CACHE_S", 5 * 60))

# OpenAI realtime
OPENAI_REALTIME_URL: str = (os.getenv("OPENAI_REALTIME_URL") or "").strip() or "wss://api.openai.com/v1/realtime"
OPENAI_CLIENT_SECRETS_URL: str = (
    os.getenv("OPENAI_CLIENT_SECRETS_URL") or ""
).strip() or "https://api.openai.com/v1/realtime/client_secrets"
OPENAI_VOICE: str = (os.getenv("OPENAI_VOICE") or "").strip() or "shimmer"
OPENAI_TRANSCRIPTION_MODEL: str = (os.getenv("OPENAI_TRANSCRIPTION_MODEL") or "").strip() or "whisper-1"
OPENAI_CONNECT_TIMEOUT_S: float = max(0.1, _get_float("OPENAI_CONNECT_TIMEOUT_S", 15.0))
OPENAI_SAMPLE_RATE_HZ: int = 24000

# Sarvam conversational agent
SARVAM_WS_URL: str = (os.getenv("SARVAM_WS_URL") or "").strip() or "wss://apps.sarvam.ai/api/app-runtime/ws"
SARVAM_ORG_ID: str = (os.getenv("SARVAM_ORG_ID") or "").strip()
SARVAM_WORKSPACE_ID: str = (os.getenv("SARVAM_WORKSPACE_ID") or "").strip()
SARVAM_APP_ID: str = (os.getenv("SARVAM_APP_ID") or "").strip()
# Unset or "latest" means the latest committed app version.
SARVAM_VERSION: int | None = _get_optional_int("SARVAM_VERSION")
SARVAM_USER_IDENTIFIER: str = (os.getenv("SARVAM_USER_IDENTIFIER") or "").strip() or "care-admin@care.org"
SARVAM_CONNECT_TIMEOUT_S: float = max(0.1, _get_float("SARVAM_CONNECT_TIMEOUT_S", 10.0))
SARVAM_SAMPLE_RATE_HZ: int = 16000

__all__ = [
    "OPENAI_CLIENT_SECRETS_URL",
    "OPENAI_CONNECT_TIMEOUT_S",
    "OPENAI_REALTIME_URL",
    "OPENAI_SAMPLE_RATE_HZ",
    "OPENAI_TRANSCRIPTION_MODEL",
    "OPENAI_VOICE",
    "SARVAM_APP_ID",
    "SARVAM_CONNECT_TIMEOUT_S",
    "SARVAM_ORG_ID",
    "SARVAM_SAMPLE_RATE_HZ",
    "SARVAM_USER_IDENTIFIER",
    "SARVAM_VERSION",
    "SARVAM_WORKSPACE_ID",
    "SARVAM_WS_URL",
    "VOICE_PROVIDER",
    "VOICE_PROVIDER_CACHE_S",
]
