"""The single callback contract every voice engine reports through."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass


def _noop(*_args: object) -> None:
    return None


@dataclass(slots=True)
class VoiceEngineCallbacks:
    on_connected: Callable[[], None] = _noop
    on_disconnected: Callable[[], None] = _noop
    on_error: Callable[[str], None] = _noop
    on_user_speech_start: Callable[[], None] = _noop
    on_user_speech_end: Callable[[], None] = _noop
    # (utterance_id, text)
    on_user_transcript: Callable[[str, str], None] = _noop
    # (utterance_id, delta, full_text)
    on_assistant_transcript_delta: Callable[[str, str, str], None] = _noop
    on_assistant_transcript_done: Callable[[str], None] = _noop
    on_assistant_speaking_start: Callable[[], None] = _noop
    on_assistant_speaking_end: Callable[[], None] = _noop
    # (user_text, assistant_text); both non-empty
    on_response_complete: Callable[[str, str], None] = _noop


__all__ = ["VoiceEngineCallbacks"]
