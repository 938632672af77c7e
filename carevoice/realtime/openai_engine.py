"""OpenAI Realtime adapter.

Speaks the realtime WebSocket protocol: a `session.update` configures the
persona, server-side VAD drives turn taking, and transcript/audio events are
normalized onto `VoiceEngineCallbacks` by the base class helpers.
"""

from __future__ import annotations

import base64
import logging
from typing import Any
from collections.abc import Callable

from carevoice.errors import CredentialsError
from carevoice.state.settings import OpenAISettings

from .engine import VoiceEngine
from .callbacks import VoiceEngineCallbacks

logger = logging.getLogger(__name__)

EventHandler = Callable[[dict[str, Any]], None]


def _output_text(response: dict[str, Any]) -> str:
    """Concatenate the assistant text (or audio transcript) of a finished response."""
    parts: list[str] = []
    for item in response.get("output") or []:
        if not isinstance(item, dict) or item.get("type") != "message":
            continue
        for content in item.get("content") or []:
            if not isinstance(content, dict):
                continue
            text = content.get("text") or content.get("transcript")
            if isinstance(text, str) and text:
                parts.append(text)
    return " ".join(parts)


class OpenAIVoiceEngine(VoiceEngine):
    provider = "openai"

    def __init__(self, callbacks: VoiceEngineCallbacks, *, settings: OpenAISettings, **kwargs: Any) -> None:
        super().__init__(callbacks, **kwargs)
        self._settings = settings
        self._token: str | None = None
        self._last_user_text = ""
        self._last_user_item_id: str | None = None
        self._last_assistant_text = ""
        self._committed_item_id: str | None = None
        self._pending_assistant: tuple[str, str] | None = None
        self._handlers: dict[str, EventHandler] = {
            "session.created": self._on_session_ready,
            "session.updated": self._on_session_ready,
            "input_audio_buffer.speech_started": self._on_speech_started,
            "input_audio_buffer.speech_stopped": self._on_speech_stopped,
            "input_audio_buffer.committed": self._on_buffer_committed,
            "conversation.item.input_audio_transcription.completed": self._on_user_transcript,
            "conversation.item.input_audio_transcription.failed": self._on_transcript_failed,
            "response.output_audio_transcript.delta": self._on_assistant_delta,
            "response.audio_transcript.delta": self._on_assistant_delta,
            "response.output_text.delta": self._on_assistant_delta,
            "response.text.delta": self._on_assistant_delta,
            "response.output_audio_transcript.done": self._on_assistant_done,
            "response.audio_transcript.done": self._on_assistant_done,
            "response.output_text.done": self._on_assistant_done,
            "response.text.done": self._on_assistant_done,
            "response.output_audio.delta": self._on_audio_delta,
            "response.audio.delta": self._on_audio_delta,
            "output_audio_buffer.stopped": self._on_playback_stopped,
            "conversation.interrupted": self._on_interrupted,
            "response.done": self._on_response_done,
            "error": self._on_vendor_error,
        }

    # ------------------------------------------------------------- lifecycle

    def _connect_timeout_s(self) -> float:
        return self._settings.connect_timeout_s

    async def _prepare(self, attempt: int) -> None:
        if not self._settings.model:
            raise CredentialsError(provider=self.provider, message="No realtime model configured")
        self._token = await self._credentials.fetch_realtime_token()

    async def _open_transport(self, instructions: str, attempt: int) -> None:
        url = f"{self._settings.realtime_url}?model={self._settings.model}"
        headers = [("Authorization", f"Bearer {self._token}")]
        if not await self._adopt_socket(url, headers, attempt):
            return
        await self._send_json(self._session_update(instructions))
        await self._await_ready()

    def _session_update(self, instructions: str) -> dict[str, Any]:
        audio_format = {"type": "audio/pcm", "rate": self._settings.sample_rate_hz}
        return {
            "type": "session.update",
            "session": {
                "type": "realtime",
                "instructions": instructions,
                "output_modalities": ["audio"],
                "audio": {
                    "input": {
                        "format": audio_format,
                        "transcription": {"model": self._settings.transcription_model},
                        "turn_detection": {"type": "server_vad"},
                    },
                    "output": {"format": audio_format, "voice": self._settings.voice},
                },
            },
        }

    def _reset_vendor_state(self) -> None:
        self._token = None
        self._last_user_text = ""
        self._last_user_item_id = None
        self._last_assistant_text = ""
        self._committed_item_id = None
        self._pending_assistant = None

    # --------------------------------------------------------------- outbound

    async def _send_text(self, text: str) -> None:
        self._last_user_text = text
        self._last_user_item_id = None
        await self._send_json(
            {
                "type": "conversation.item.create",
                "item": {
                    "type": "message",
                    "role": "user",
                    "content": [{"type": "input_text", "text": text}],
                },
            }
        )
        await self._send_json({"type": "response.create"})

    async def _send_audio(self, pcm: bytes) -> None:
        await self._send_json(
            {"type": "input_audio_buffer.append", "audio": base64.b64encode(pcm).decode("ascii")}
        )

    def _on_mic_mute_changed(self, muted: bool) -> None:
        if muted:
            self._send_soon({"type": "input_audio_buffer.clear"})

    # ---------------------------------------------------------------- inbound

    def handle_event(self, event: dict[str, Any]) -> None:
        kind = event.get("type")
        handler = self._handlers.get(kind) if isinstance(kind, str) else None
        if handler is None:
            logger.debug("openai event %s ignored", kind)
            return
        handler(event)

    def _on_session_ready(self, event: dict[str, Any]) -> None:
        self._mark_ready()

    def _on_speech_started(self, event: dict[str, Any]) -> None:
        if self._mic_muted:
            return
        if self._assistant.open_id is not None or self._assistant_speaking:
            self._interrupt()
        self._user_speech_start()

    def _on_speech_stopped(self, event: dict[str, Any]) -> None:
        self._user_speech_end()

    def _on_buffer_committed(self, event: dict[str, Any]) -> None:
        item_id = event.get("item_id")
        if isinstance(item_id, str) and item_id:
            self._committed_item_id = item_id

    def _on_user_transcript(self, event: dict[str, Any]) -> None:
        self._user_speech_end()
        item_id = str(event.get("item_id") or "")
        text = str(event.get("transcript") or "").strip()
        pending = self._take_pending(item_id)
        if not item_id or not text:
            return
        if not self._user_transcript(item_id, text):
            return
        if pending is not None:
            self._response_complete(text, pending)
            return
        self._last_user_text = text
        self._last_user_item_id = item_id

    def _on_transcript_failed(self, event: dict[str, Any]) -> None:
        self._user_speech_end()
        item_id = str(event.get("item_id") or "")
        if self._take_pending(item_id) is not None:
            logger.info("openai transcription of %s failed; its response is not saved", item_id)

    def _take_pending(self, item_id: str) -> str | None:
        """Pop the response held for the user item `item_id`, if any."""
        if self._pending_assistant is None or self._pending_assistant[0] != item_id:
            return None
        _, text = self._pending_assistant
        self._pending_assistant = None
        return text

    def _on_assistant_delta(self, event: dict[str, Any]) -> None:
        item_id = event.get("item_id")
        delta = event.get("delta")
        if not isinstance(item_id, str) or not isinstance(delta, str):
            return
        full_text = self._assistant_delta(item_id, delta)
        if full_text is not None:
            self._last_assistant_text = full_text

    def _on_assistant_done(self, event: dict[str, Any]) -> None:
        item_id = event.get("item_id")
        self._finish_assistant(item_id if isinstance(item_id, str) else None)

    def _on_audio_delta(self, event: dict[str, Any]) -> None:
        data = event.get("delta")
        if not isinstance(data, str) or not data:
            return
        try:
            pcm = base64.b64decode(data)
        except ValueError:
            logger.debug("openai audio delta was not valid base64")
            return
        self._write_audio(pcm)

    def _on_playback_stopped(self, event: dict[str, Any]) -> None:
        self._speaking_end()

    def _on_interrupted(self, event: dict[str, Any]) -> None:
        self._interrupt()

    def _on_response_done(self, event: dict[str, Any]) -> None:
        response = event.get("response") or {}
        user_item_id, self._committed_item_id = self._committed_item_id, None
        self._finish_assistant()
        self._speaking_end()
        if response.get("status") == "cancelled":
            self._last_assistant_text = ""
            return
        assistant_text = _output_text(response) or self._last_assistant_text
        self._last_assistant_text = ""
        if not assistant_text.strip():
            return
        if user_item_id is not None and user_item_id != self._last_user_item_id:
            # Transcription of the committed user turn can land after the response.
            self._pending_assistant = (user_item_id, assistant_text)
            return
        if self._response_complete(self._last_user_text, assistant_text):
            self._last_user_text = ""

    def _on_vendor_error(self, event: dict[str, Any]) -> None:
        error = event.get("error")
        message = error.get("message") if isinstance(error, dict) else None
        self._emit("on_error", str(message or "An error occurred"))


__all__ = ["OpenAIVoiceEngine"]
