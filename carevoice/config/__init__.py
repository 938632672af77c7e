"""Configuration module exports (env-resolved constants only)."""

from .models import LLMS, DEFAULT_CONTEXT_LIMIT
from .voice import VOICE_PROVIDER
from .limits import TOKEN_BUDGET_RATIO

__all__ = [
    "DEFAULT_CONTEXT_LIMIT",
    "LLMS",
    "TOKEN_BUDGET_RATIO",
    "VOICE_PROVIDER",
]
