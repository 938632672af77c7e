"""Typed events of the Sarvam conversational protocol.

Every inbound frame carries a `type` tag from a closed set. `parse_sarvam_event`
turns the raw dict into one payload dataclass per tag so the engine dispatches
on `SarvamEventKind` instead of comparing strings.
"""

from __future__ import annotations

import base64
import logging
import binascii
from enum import Enum
from typing import Any, ClassVar
from dataclasses import dataclass

logger = logging.getLogger(__name__)


class SarvamEventKind(str, Enum):
    USER_SPEECH_START = "server.event.user_speech_start"
    USER_SPEECH_END = "server.event.user_speech_end"
    USER_INTERRUPT = "server.event.user_interrupt"
    USER_TRANSCRIPT = "server.event.user_transcript"
    TRANSCRIPTION = "server.event.transcription"
    AGENT_RESPONSE_START = "server.event.agent_response_start"
    AGENT_RESPONSE_END = "server.event.agent_response_end"
    INTERACTION_CONNECTED = "server.action.interaction_connected"
    INTERACTION_END = "server.action.interaction_end"
    TEXT_CHUNK = "server.media.text_chunk"
    AUDIO_CHUNK = "server.media.audio_chunk"
    ERROR = "server.event.error"
    UNKNOWN = "unknown"


@dataclass(frozen=True, slots=True)
class UserSpeechStart:
    kind: ClassVar[SarvamEventKind] = SarvamEventKind.USER_SPEECH_START


@dataclass(frozen=True, slots=True)
class UserSpeechEnd:
    kind: ClassVar[SarvamEventKind] = SarvamEventKind.USER_SPEECH_END


@dataclass(frozen=True, slots=True)
class UserInterrupt:
    kind: ClassVar[SarvamEventKind] = SarvamEventKind.USER_INTERRUPT


@dataclass(frozen=True, slots=True)
class UserTranscript:
    text: str
    kind: ClassVar[SarvamEventKind] = SarvamEventKind.USER_TRANSCRIPT


@dataclass(frozen=True, slots=True)
class Transcription:
    # "user" or "bot"
    role: str
    content: str
    kind: ClassVar[SarvamEventKind] = SarvamEventKind.TRANSCRIPTION


@dataclass(frozen=True, slots=True)
class AgentResponseStart:
    kind: ClassVar[SarvamEventKind] = SarvamEventKind.AGENT_RESPONSE_START


@dataclass(frozen=True, slots=True)
class AgentResponseEnd:
    kind: ClassVar[SarvamEventKind] = SarvamEventKind.AGENT_RESPONSE_END


@dataclass(frozen=True, slots=True)
class InteractionConnected:
    interaction_id: str | None = None
    kind: ClassVar[SarvamEventKind] = SarvamEventKind.INTERACTION_CONNECTED


@dataclass(frozen=True, slots=True)
class InteractionEnd:
    kind: ClassVar[SarvamEventKind] = SarvamEventKind.INTERACTION_END


@dataclass(frozen=True, slots=True)
class TextChunk:
    text: str
    kind: ClassVar[SarvamEventKind] = SarvamEventKind.TEXT_CHUNK


@dataclass(frozen=True, slots=True)
class AudioChunk:
    audio: bytes
    kind: ClassVar[SarvamEventKind] = SarvamEventKind.AUDIO_CHUNK


@dataclass(frozen=True, slots=True)
class ErrorEvent:
    message: str
    kind: ClassVar[SarvamEventKind] = SarvamEventKind.ERROR


@dataclass(frozen=True, slots=True)
class UnknownEvent:
    type: str
    kind: ClassVar[SarvamEventKind] = SarvamEventKind.UNKNOWN


SarvamEvent = (
    UserSpeechStart
    | UserSpeechEnd
    | UserInterrupt
    | UserTranscript
    | Transcription
    | AgentResponseStart
    | AgentResponseEnd
    | InteractionConnected
    | InteractionEnd
    | TextChunk
    | AudioChunk
    | ErrorEvent
    | UnknownEvent
)


def _text(data: dict[str, Any], *keys: str) -> str:
    for key in keys:
        value = data.get(key)
        if isinstance(value, str):
            return value
    return ""


def _decode_audio(data: dict[str, Any]) -> bytes:
    raw = _text(data, "audio", "data")
    if not raw:
        return b""
    try:
        return base64.b64decode(raw)
    except (binascii.Error, ValueError):
        logger.debug("sarvam audio chunk was not valid base64")
        return b""


def parse_sarvam_event(raw: dict[str, Any]) -> SarvamEvent:
    tag = raw.get("type")
    data = raw.get("data")
    if not isinstance(data, dict):
        data = {}
    try:
        kind = SarvamEventKind(tag)
    except ValueError:
        return UnknownEvent(type=str(tag))

    if kind is SarvamEventKind.USER_SPEECH_START:
        return UserSpeechStart()
    if kind is SarvamEventKind.USER_SPEECH_END:
        return UserSpeechEnd()
    if kind is SarvamEventKind.USER_INTERRUPT:
        return UserInterrupt()
    if kind is SarvamEventKind.USER_TRANSCRIPT:
        return UserTranscript(text=_text(data, "text"))
    if kind is SarvamEventKind.TRANSCRIPTION:
        return Transcription(role=_text(data, "role"), content=_text(data, "content", "text"))
    if kind is SarvamEventKind.AGENT_RESPONSE_START:
        return AgentResponseStart()
    if kind is SarvamEventKind.AGENT_RESPONSE_END:
        return AgentResponseEnd()
    if kind is SarvamEventKind.INTERACTION_CONNECTED:
        return InteractionConnected(interaction_id=_text(data, "interaction_id") or None)
    if kind is SarvamEventKind.INTERACTION_END:
        return InteractionEnd()
    if kind is SarvamEventKind.TEXT_CHUNK:
        return TextChunk(text=_text(data, "text"))
    if kind is SarvamEventKind.AUDIO_CHUNK:
        return AudioChunk(audio=_decode_audio(data))
    if kind is SarvamEventKind.ERROR:
        return ErrorEvent(message=_text(data, "message", "error") or "An error occurred")
    return UnknownEvent(type=str(tag))


__all__ = [
    "AgentResponseEnd",
    "AgentResponseStart",
    "AudioChunk",
    "ErrorEvent",
    "InteractionConnected",
    "InteractionEnd",
    "SarvamEvent",
    "SarvamEventKind",
    "TextChunk",
    "Transcription",
    "UnknownEvent",
    "UserInterrupt",
    "UserSpeechEnd",
    "UserSpeechStart",
    "UserTranscript",
    "parse_sarvam_event",
]
