"""Realtime voice engines and their factory."""

from .state import ConnectionState
from .engine import VoiceEngine
from .factory import create_voice_engine
from .resolver import ProviderResolver
from .providers import VoiceProvider, provider_for_model
from .callbacks import VoiceEngineCallbacks
from .credentials import CredentialsClient
from .transcripts import TranscriptAccumulator
from .sarvam_engine import SarvamVoiceEngine
from .openai_engine import OpenAIVoiceEngine

__all__ = [
    "ConnectionState",
    "CredentialsClient",
    "OpenAIVoiceEngine",
    "ProviderResolver",
    "SarvamVoiceEngine",
    "TranscriptAccumulator",
    "VoiceEngine",
    "VoiceEngineCallbacks",
    "VoiceProvider",
    "create_voice_engine",
    "provider_for_model",
]
