"""Web app endpoints used by the voice engines and the orchestrator."""

from __future__ import annotations

import os

APP_BASE_URL: str = ((os.getenv("APP_BASE_URL") or "").strip() or "http://localhost:3000").rstrip("/")

REALTIME_TOKEN_PATH = "/api/realtime/token"
SARVAM_CONFIG_PATH = "/api/realtime/sarvam-config"
VOICE_PROVIDER_PATH = "/api/config/voice-provider"
CHATS_PATH = "/api/chats"
CHAT_MESSAGES_PATH = "/api/chats/messages"

_HTTP_TIMEOUT_S_RAW = (os.getenv("HTTP_TIMEOUT_S") or "").strip()
try:
    HTTP_TIMEOUT_S: float = float(_HTTP_TIMEOUT_S_RAW) if _HTTP_TIMEOUT_S_RAW else 10.0
except Exception:
    HTTP_TIMEOUT_S = 10.0
if HTTP_TIMEOUT_S <= 0:
    HTTP_TIMEOUT_S = 10.0

__all__ = [
    "APP_BASE_URL",
    "CHATS_PATH",
    "CHAT_MESSAGES_PATH",
    "HTTP_TIMEOUT_S",
    "REALTIME_TOKEN_PATH",
    "SARVAM_CONFIG_PATH",
    "VOICE_PROVIDER_PATH",
]
