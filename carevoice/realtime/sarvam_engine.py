"""Sarvam conversational-agent adapter.

The vendor drives a call over one WebSocket: `client.action.interaction_start`
opens it, `server.action.interaction_connected` marks it ready and the
`server.event.*` stream describes both sides of the conversation. Utterance
ids are synthesized locally as `sarvam-user-N` / `sarvam-assistant-N`.
"""

from __future__ import annotations

import base64
import logging
from typing import Any
from collections.abc import Callable

from carevoice.errors import CredentialsError
from carevoice.config.secrets import get_sarvam_api_key
from carevoice.state.settings import SarvamSettings

from .engine import VoiceEngine
from .callbacks import VoiceEngineCallbacks
from .sarvam_events import (
    AudioChunk,
    ErrorEvent,
    TextChunk,
    SarvamEvent,
    UnknownEvent,
    Transcription,
    UserTranscript,
    SarvamEventKind,
    parse_sarvam_event,
)

logger = logging.getLogger(__name__)

# Each handler takes the payload class its kind parses to.
SarvamHandler = Callable[[Any], None]


class SarvamVoiceEngine(VoiceEngine):
    provider = "sarvam"

    def __init__(self, callbacks: VoiceEngineCallbacks, *, settings: SarvamSettings, **kwargs: Any) -> None:
        super().__init__(callbacks, **kwargs)
        self._settings = settings
        self._api_key: str | None = None
        self._user_seq = 0
        self._assistant_seq = 0
        self._user_text = ""
        self._assistant_text = ""
        self._reported_user_seq = 0
        self._handlers: dict[SarvamEventKind, SarvamHandler] = {
            SarvamEventKind.USER_SPEECH_START: self._on_user_speech_start,
            SarvamEventKind.USER_SPEECH_END: self._on_user_speech_end,
            SarvamEventKind.USER_INTERRUPT: self._on_user_interrupt,
            SarvamEventKind.USER_TRANSCRIPT: self._on_user_transcript,
            SarvamEventKind.TRANSCRIPTION: self._on_transcription,
            SarvamEventKind.AGENT_RESPONSE_START: self._on_response_start,
            SarvamEventKind.AGENT_RESPONSE_END: self._on_response_end,
            SarvamEventKind.INTERACTION_CONNECTED: self._on_interaction_connected,
            SarvamEventKind.INTERACTION_END: self._on_interaction_end,
            SarvamEventKind.TEXT_CHUNK: self._on_text_chunk,
            SarvamEventKind.AUDIO_CHUNK: self._on_audio_chunk,
            SarvamEventKind.ERROR: self._on_vendor_error,
            SarvamEventKind.UNKNOWN: self._on_unknown,
        }

    @property
    def handled_kinds(self) -> frozenset[SarvamEventKind]:
        return frozenset(self._handlers)

    @property
    def user_utterance_id(self) -> str:
        return f"sarvam-user-{self._user_seq}"

    @property
    def assistant_utterance_id(self) -> str:
        return f"sarvam-assistant-{self._assistant_seq}"

    # ------------------------------------------------------------- lifecycle

    def _connect_timeout_s(self) -> float:
        return self._settings.connect_timeout_s

    async def _prepare(self, attempt: int) -> None:
        if not await self._credentials.fetch_sarvam_configured():
            raise CredentialsError(provider=self.provider, message="Sarvam API key is not configured")
        api_key = get_sarvam_api_key()
        if not api_key:
            raise CredentialsError(provider=self.provider, message="Missing Sarvam configuration: SARVAM_API_KEY")
        missing = [
            name
            for name, value in (
                ("SARVAM_ORG_ID", self._settings.org_id),
                ("SARVAM_WORKSPACE_ID", self._settings.workspace_id),
                ("SARVAM_APP_ID", self._settings.app_id),
            )
            if not value
        ]
        if missing:
            raise CredentialsError(
                provider=self.provider,
                message=f"Missing Sarvam configuration: {', '.join(missing)}",
            )
        self._api_key = api_key

    def _interaction_config(self) -> dict[str, Any]:
        config: dict[str, Any] = {
            "user_identifier_type": "email",
            "user_identifier": self._settings.user_identifier,
            "org_id": self._settings.org_id,
            "workspace_id": self._settings.workspace_id,
            "app_id": self._settings.app_id,
            "interaction_type": "CALL",
            "input_sample_rate": self._settings.sample_rate_hz,
            "output_sample_rate": self._settings.sample_rate_hz,
        }
        if self._settings.version is not None:
            config["version"] = int(self._settings.version)
        return config

    async def _open_transport(self, instructions: str, attempt: int) -> None:
        headers = [("api-subscription-key", self._api_key or "")]
        if not await self._adopt_socket(self._settings.ws_url, headers, attempt):
            return
        config = self._interaction_config()
        logger.info(
            "sarvam interaction config: org_id=%s workspace_id=%s app_id=%s interaction_type=CALL version=%s",
            config["org_id"],
            config["workspace_id"],
            config["app_id"],
            config.get("version", "latest committed"),
        )
        # Agent persona lives in the Sarvam app; the instructions are not sent.
        logger.debug("sarvam ignores %d chars of local instructions", len(instructions))
        await self._send_json({"type": "client.action.interaction_start", "data": config})
        await self._await_ready()

    def _goodbye_message(self) -> dict[str, Any] | None:
        return {"type": "client.action.interaction_end"}

    def _reset_vendor_state(self) -> None:
        self._api_key = None
        self._user_text = ""
        self._assistant_text = ""

    # --------------------------------------------------------------- outbound

    async def _send_text(self, text: str) -> None:
        self._user_seq += 1
        self._user_text = text
        await self._send_json({"type": "client.action.text_input", "data": {"text": text}})

    async def _send_audio(self, pcm: bytes) -> None:
        await self._send_json(
            {
                "type": "client.media.audio_chunk",
                "data": {
                    "audio": base64.b64encode(pcm).decode("ascii"),
                    "sample_rate": self._settings.sample_rate_hz,
                },
            }
        )

    # ---------------------------------------------------------------- inbound

    def handle_event(self, event: dict[str, Any]) -> None:
        parsed = parse_sarvam_event(event)
        self._handlers[parsed.kind](parsed)

    def _set_user_text(self, text: str) -> None:
        if self._mic_muted:
            return
        if self._user_seq == 0:
            self._user_seq = 1
        if self._user_transcript(self.user_utterance_id, text):
            self._user_text = text

    def _assistant_chunk(self, text: str) -> None:
        if self._assistant_seq == 0:
            self._assistant_seq = 1
        full_text = self._assistant_delta(self.assistant_utterance_id, text)
        if full_text is not None:
            self._assistant_text = full_text

    def _report_pair(self) -> None:
        if self._user_seq == self._reported_user_seq:
            return
        if self._response_complete(self._user_text, self._assistant_text):
            self._reported_user_seq = self._user_seq

    def _on_user_speech_start(self, event: SarvamEvent) -> None:
        if self._mic_muted:
            return
        self._user_seq += 1
        self._user_text = ""
        self._user_speech_start()

    def _on_user_speech_end(self, event: SarvamEvent) -> None:
        self._user_speech_end()

    def _on_user_interrupt(self, event: SarvamEvent) -> None:
        self._interrupt()
        self._assistant_text = ""

    def _on_user_transcript(self, event: UserTranscript) -> None:
        if event.text:
            self._set_user_text(event.text)

    def _on_transcription(self, event: Transcription) -> None:
        if not event.content:
            return
        if event.role == "user":
            self._set_user_text(event.content)
        elif event.role == "bot":
            self._assistant_chunk(event.content)

    def _on_response_start(self, event: SarvamEvent) -> None:
        self._finish_assistant()
        self._assistant_seq += 1
        self._assistant_text = ""
        self._speaking_start()

    def _on_response_end(self, event: SarvamEvent) -> None:
        self._finish_assistant(self.assistant_utterance_id)
        self._speaking_end()
        self._report_pair()

    def _on_interaction_connected(self, event: SarvamEvent) -> None:
        self._mark_ready()

    def _on_interaction_end(self, event: SarvamEvent) -> None:
        logger.info("sarvam interaction ended by the agent")
        self._report_pair()

    def _on_text_chunk(self, event: TextChunk) -> None:
        if event.text:
            self._assistant_chunk(event.text)

    def _on_audio_chunk(self, event: AudioChunk) -> None:
        if event.audio:
            self._write_audio(event.audio)

    def _on_vendor_error(self, event: ErrorEvent) -> None:
        self._emit("on_error", event.message)

    def _on_unknown(self, event: UnknownEvent) -> None:
        logger.debug("sarvam event %s ignored", event.type)


__all__ = ["SarvamVoiceEngine"]
