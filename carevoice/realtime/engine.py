"""Provider-agnostic realtime voice engine.

Each vendor adapter subclasses `VoiceEngine` and only translates its own wire
protocol. The base class owns the pieces both vendors must agree on:

* connection lifecycle (one owned socket, readiness wait, idempotent teardown,
  late connections ignored after `disconnect()`),
* transcript accumulation keyed by utterance id,
* the interruption sequence,
* mic-mute suppression and speaker-mute diversion,
* the non-empty guarantee on `on_response_complete`.
"""

from __future__ import annotations

import asyncio
import logging
import contextlib
from typing import Any
from abc import ABC, abstractmethod
from collections.abc import Callable, Coroutine

import orjson
import websockets
from websockets.exceptions import ConnectionClosed

from carevoice.audio import AudioInterface, BufferedAudioInterface, PlaybackGate
from carevoice.errors import ConnectionTimeoutError, NotConnectedError, TransportClosedError

from .state import ConnectionState
from .callbacks import VoiceEngineCallbacks
from .credentials import CredentialsClient
from .transcripts import TranscriptAccumulator

logger = logging.getLogger(__name__)

ConnectFn = Callable[..., Any]


class VoiceEngine(ABC):
    provider: str = "voice"

    def __init__(
        self,
        callbacks: VoiceEngineCallbacks,
        *,
        credentials: CredentialsClient,
        audio: AudioInterface | None = None,
        connect_fn: ConnectFn | None = None,
    ) -> None:
        self._callbacks = callbacks
        self._credentials = credentials
        self._connect_fn: ConnectFn = connect_fn or websockets.connect
        self._audio_override = audio
        self._audio: AudioInterface | None = None
        self._speaker = PlaybackGate()
        self._ws: Any | None = None
        self._state = ConnectionState.DISCONNECTED
        self._attempt = 0
        self._ready = asyncio.Event()
        self._closed_before_ready = False
        self._mic_muted = False
        self._assistant = TranscriptAccumulator()
        self._assistant_speaking = False
        self._tasks: set[asyncio.Task] = set()
        self._closing: set[asyncio.Task] = set()

    # ------------------------------------------------------------------ contract

    @property
    def connection_state(self) -> ConnectionState:
        return self._state

    @property
    def audio(self) -> AudioInterface | None:
        return self._audio

    @property
    def mic_muted(self) -> bool:
        return self._mic_muted

    @property
    def speaker_muted(self) -> bool:
        return self._speaker.muted

    def is_connected(self) -> bool:
        return self._state is ConnectionState.CONNECTED

    async def connect(self, instructions: str, start_muted: bool = False) -> None:
        if self._state is not ConnectionState.DISCONNECTED:
            logger.warning("%s connect() ignored; engine is %s", self.provider, self._state.value)
            return

        self._attempt += 1
        attempt = self._attempt
        self._state = ConnectionState.CONNECTING
        self._ready = asyncio.Event()
        self._closed_before_ready = False
        if start_muted:
            self._mic_muted = True

        try:
            await self._prepare(attempt)
            if self._is_stale(attempt):
                return
            self._audio = self._audio_override or BufferedAudioInterface()
            if self._mic_muted:
                self._audio.pause_recording()
            self._speaker.attach(self._audio)
            timeout_s = self._connect_timeout_s()
            try:
                await asyncio.wait_for(self._open_transport(instructions, attempt), timeout=timeout_s)
            except asyncio.TimeoutError as exc:
                if self._is_stale(attempt):
                    return
                raise ConnectionTimeoutError(provider=self.provider, timeout_s=timeout_s) from exc
        except BaseException:
            if not self._is_stale(attempt):
                self._release()
                self._state = ConnectionState.DISCONNECTED
            raise

        if self._is_stale(attempt):
            logger.info("%s connection finished after disconnect(); discarding", self.provider)
            return

        # Mute before anyone hears about the connection so no audio is captured first.
        self.mute(self._mic_muted)
        self._state = ConnectionState.CONNECTED
        self._spawn(self._pump_microphone(attempt))
        logger.info("%s session connected", self.provider)
        self._emit("on_connected")

    def disconnect(self) -> None:
        try:
            self._attempt += 1
            previous = self._state
            self._state = ConnectionState.DISCONNECTED
            self._release()
            if previous is not ConnectionState.DISCONNECTED:
                logger.info("%s session disconnected", self.provider)
        except Exception:
            logger.debug("%s teardown failed", self.provider, exc_info=True)
        self._emit("on_disconnected")

    def mute(self, muted: bool) -> None:
        self._mic_muted = bool(muted)
        try:
            if self._audio is not None:
                if self._mic_muted:
                    self._audio.pause_recording()
                else:
                    self._audio.resume_recording()
            if self._ws is not None:
                self._on_mic_mute_changed(self._mic_muted)
        except Exception:
            logger.debug("%s mute(%s) failed", self.provider, muted, exc_info=True)

    def mute_speaker(self, muted: bool) -> None:
        try:
            self._speaker.set_muted(muted)
        except Exception:
            logger.debug("%s mute_speaker(%s) failed", self.provider, muted, exc_info=True)

    async def send_text_message(self, text: str) -> None:
        if self._ws is None or self._state is not ConnectionState.CONNECTED:
            raise NotConnectedError(provider=self.provider)
        await self._send_text(text)

    async def wait_closed(self) -> None:
        """Wait for sockets closed by `disconnect()` to finish closing."""
        if self._closing:
            await asyncio.gather(*list(self._closing), return_exceptions=True)

    # ------------------------------------------------------------ vendor hooks

    @abstractmethod
    async def _prepare(self, attempt: int) -> None:
        """Credential exchange and config validation before the transport opens."""

    @abstractmethod
    async def _open_transport(self, instructions: str, attempt: int) -> None:
        """Open the socket (via `_adopt_socket`), configure the session, await readiness."""

    @abstractmethod
    def _connect_timeout_s(self) -> float: ...

    @abstractmethod
    def handle_event(self, event: dict[str, Any]) -> None:
        """Translate one decoded vendor event into callbacks."""

    @abstractmethod
    async def _send_text(self, text: str) -> None: ...

    @abstractmethod
    async def _send_audio(self, pcm: bytes) -> None: ...

    def _on_mic_mute_changed(self, muted: bool) -> None:
        return None

    def _reset_vendor_state(self) -> None:
        return None

    def _goodbye_message(self) -> dict[str, Any] | None:
        return None

    # --------------------------------------------------------------- transport

    def _is_stale(self, attempt: int) -> bool:
        return attempt != self._attempt

    async def _adopt_socket(self, url: str, headers: list[tuple[str, str]], attempt: int) -> bool:
        ws = await self._connect_fn(url, additional_headers=headers, max_size=None)
        if self._is_stale(attempt):
            self._schedule_close(ws)
            return False
        self._ws = ws
        self._spawn(self._read_loop(ws, attempt))
        return True

    async def _await_ready(self) -> None:
        await self._ready.wait()
        if self._closed_before_ready:
            raise TransportClosedError(provider=self.provider)

    def _mark_ready(self) -> None:
        self._ready.set()

    async def _send_json(self, payload: dict[str, Any]) -> None:
        ws = self._ws
        if ws is None:
            raise NotConnectedError(provider=self.provider)
        await ws.send(orjson.dumps(payload).decode("utf-8"))

    def _send_soon(self, payload: dict[str, Any]) -> None:
        if self._ws is None:
            return
        self._spawn(self._send_json_quietly(payload))

    async def _send_json_quietly(self, payload: dict[str, Any]) -> None:
        try:
            await self._send_json(payload)
        except Exception:
            logger.debug("%s send of %s failed", self.provider, payload.get("type"), exc_info=True)

    async def _read_loop(self, ws: Any, attempt: int) -> None:
        try:
            async for raw in ws:
                if self._is_stale(attempt):
                    return
                try:
                    event = orjson.loads(raw)
                except orjson.JSONDecodeError:
                    logger.debug("%s sent a non-JSON frame; ignoring", self.provider)
                    continue
                if not isinstance(event, dict):
                    continue
                try:
                    self.handle_event(event)
                except Exception:
                    logger.exception("%s event handler failed for %s", self.provider, event.get("type"))
        except asyncio.CancelledError:
            return
        except ConnectionClosed:
            logger.debug("%s transport closed", self.provider, exc_info=True)
        except Exception:
            logger.exception("%s transport reader failed", self.provider)
        if not self._is_stale(attempt):
            self._on_transport_closed()

    def _on_transport_closed(self) -> None:
        if self._state is ConnectionState.CONNECTING:
            self._closed_before_ready = True
            self._ready.set()
            return
        if self._state is ConnectionState.DISCONNECTED:
            return
        logger.info("%s closed the session", self.provider)
        self._attempt += 1
        self._state = ConnectionState.DISCONNECTED
        self._release()
        self._emit("on_disconnected")

    async def _pump_microphone(self, attempt: int) -> None:
        audio = self._audio
        if audio is None:
            return
        try:
            async for frame in audio.frames():
                if self._is_stale(attempt):
                    return
                if self._mic_muted or self._ws is None:
                    continue
                await self._send_audio(frame)
        except asyncio.CancelledError:
            return
        except ConnectionClosed:
            return
        except Exception:
            logger.exception("%s microphone pump failed", self.provider)

    def _spawn(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Task | None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            coro.close()
            return None
        task = loop.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def _schedule_close(self, ws: Any) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        task = loop.create_task(self._close_socket(ws, self._goodbye_message()))
        self._closing.add(task)
        task.add_done_callback(self._closing.discard)

    async def _close_socket(self, ws: Any, goodbye: dict[str, Any] | None) -> None:
        if goodbye is not None:
            with contextlib.suppress(Exception):
                await ws.send(orjson.dumps(goodbye).decode("utf-8"))
        with contextlib.suppress(Exception):
            await ws.close()

    def _release(self) -> None:
        current = asyncio.current_task() if self._has_running_loop() else None
        for task in list(self._tasks):
            if task is not current:
                task.cancel()
        self._tasks.clear()

        ws, self._ws = self._ws, None
        if ws is not None:
            self._schedule_close(ws)

        audio, self._audio = self._audio, None
        self._speaker.attach(None)
        if audio is not None:
            with contextlib.suppress(Exception):
                audio.close()

        self._assistant.clear()
        self._assistant_speaking = False
        self._ready.set()
        self._reset_vendor_state()

    @staticmethod
    def _has_running_loop() -> bool:
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return False
        return True

    # ----------------------------------------------------------- normalization

    def _emit(self, name: str, *args: Any) -> None:
        try:
            getattr(self._callbacks, name)(*args)
        except Exception:
            logger.exception("%s callback %s raised", self.provider, name)

    def _assistant_delta(self, utterance_id: str, delta: str) -> str | None:
        if not delta:
            return None
        if self._assistant.is_finished(utterance_id):
            logger.debug("%s late delta for finished utterance %s dropped", self.provider, utterance_id)
            return None
        open_id = self._assistant.open_id
        if open_id is not None and open_id != utterance_id:
            self._finish_assistant(open_id)
        full_text = self._assistant.append(utterance_id, delta)
        if full_text is None:
            return None
        self._speaking_start()
        self._emit("on_assistant_transcript_delta", utterance_id, delta, full_text)
        return full_text

    def _finish_assistant(self, utterance_id: str | None = None) -> str | None:
        target = utterance_id or self._assistant.open_id
        if target is None:
            return None
        text = self._assistant.finish(target)
        if text is None:
            return None
        self._emit("on_assistant_transcript_done", target)
        return text

    def _interrupt(self) -> None:
        open_id = self._assistant.open_id
        if open_id is not None:
            self._finish_assistant(open_id)
        self._speaker.halt()
        self._speaking_end()
        self._assistant.reset()

    def _speaking_start(self) -> None:
        if self._assistant_speaking:
            return
        self._assistant_speaking = True
        self._emit("on_assistant_speaking_start")

    def _speaking_end(self) -> None:
        if not self._assistant_speaking:
            return
        self._assistant_speaking = False
        self._emit("on_assistant_speaking_end")

    def _user_speech_start(self) -> None:
        if self._mic_muted:
            return
        self._emit("on_user_speech_start")

    def _user_speech_end(self) -> None:
        if self._mic_muted:
            return
        self._emit("on_user_speech_end")

    def _user_transcript(self, utterance_id: str, text: str) -> bool:
        if self._mic_muted:
            logger.debug("%s user transcript %s suppressed while muted", self.provider, utterance_id)
            return False
        self._emit("on_user_transcript", utterance_id, text)
        return True

    def _response_complete(self, user_text: str, assistant_text: str) -> bool:
        user_text = (user_text or "").strip()
        assistant_text = (assistant_text or "").strip()
        if not user_text or not assistant_text:
            return False
        self._emit("on_response_complete", user_text, assistant_text)
        return True

    def _write_audio(self, pcm: bytes) -> None:
        if self._speaker.write(pcm):
            self._speaking_start()


__all__ = ["ConnectFn", "VoiceEngine"]
