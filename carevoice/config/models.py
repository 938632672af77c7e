"""Model catalogue (static table, keyed by model identifier)."""

from __future__ import annotations

from typing import Any

# Fallback when no realtime model advertises a context window.
DEFAULT_CONTEXT_LIMIT: int = 32_000

# Keys are "<vendor>:<model>". `voice_provider` pins a model to one realtime
# provider; models without it follow the runtime/global provider flag.
LLMS: dict[str, dict[str, Any]] = {
    "openai:gpt-5-mini-2025-08-07": {
        "name": "GPT-5 Mini",
        "realtime": False,
        "context_limit": 400_000,
    },
    "openai:gpt-5.2-2025-12-11": {
        "name": "GPT-5.2",
        "realtime": False,
        "context_limit": 400_000,
    },
    "openai:gpt-realtime-2025-08-28": {
        "name": "GPT Realtime",
        "realtime": True,
        "context_limit": 32_000,
    },
}


def realtime_model_key() -> str | None:
    for key, entry in LLMS.items():
        if entry.get("realtime"):
            return key
    return None


def realtime_model_name() -> str | None:
    key = realtime_model_key()
    if key is None:
        return None
    return key.split(":", 1)[1]


def realtime_context_limit() -> int:
    key = realtime_model_key()
    if key is None:
        return DEFAULT_CONTEXT_LIMIT
    limit = LLMS[key].get("context_limit")
    return int(limit) if limit else DEFAULT_CONTEXT_LIMIT


__all__ = [
    "DEFAULT_CONTEXT_LIMIT",
    "LLMS",
    "realtime_context_limit",
    "realtime_model_key",
    "realtime_model_name",
]
