"""Model identifier to voice provider lookup."""

from __future__ import annotations

import logging
from enum import Enum

from carevoice.config.models import LLMS

logger = logging.getLogger(__name__)


class VoiceProvider(str, Enum):
    OPENAI = "openai"
    SARVAM = "sarvam"

    @classmethod
    def parse(cls, value: object) -> VoiceProvider | None:
        if isinstance(value, VoiceProvider):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


def provider_for_model(model_id: str | None, default: VoiceProvider) -> VoiceProvider:
    """Return the provider pinned to `model_id`, else `default`. Never raises."""
    if not model_id:
        return default
    entry = LLMS.get(model_id)
    if entry is None:
        logger.warning("unknown model %r; using default voice provider %s", model_id, default.value)
        return default
    pinned = entry.get("voice_provider")
    if pinned is None:
        return default
    provider = VoiceProvider.parse(pinned)
    if provider is None:
        logger.warning("model %r pins unknown voice provider %r; using %s", model_id, pinned, default.value)
        return default
    return provider


__all__ = ["VoiceProvider", "provider_for_model"]
