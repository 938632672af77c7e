"""Queue-backed audio interface for hosts that move PCM themselves."""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from collections.abc import AsyncIterator

from .interface import AudioInterface

logger = logging.getLogger(__name__)


class BufferedAudioInterface(AudioInterface):
    """The host feeds microphone frames and drains speaker audio.

    Frames fed while recording is paused are dropped at the source, never
    queued, so nothing captured during a mute reaches the vendor later.
    """

    def __init__(self, *, max_capture_frames: int = 500) -> None:
        self._max_capture_frames = max(1, int(max_capture_frames))
        self._capture: asyncio.Queue[bytes | None] = asyncio.Queue()
        self._playback: deque[bytes] = deque()
        self._recording_paused = False
        self._playback_paused = False
        self._closed = False
        self.interrupts: int = 0

    @property
    def recording_paused(self) -> bool:
        return self._recording_paused

    @property
    def playback_paused(self) -> bool:
        return self._playback_paused

    @property
    def closed(self) -> bool:
        return self._closed

    def feed(self, pcm: bytes) -> bool:
        if self._closed or self._recording_paused or not pcm:
            return False
        # Stay live under backlog: drop the oldest captured frame.
        while self._capture.qsize() >= self._max_capture_frames:
            try:
                self._capture.get_nowait()
            except asyncio.QueueEmpty:
                break
        self._capture.put_nowait(bytes(pcm))
        return True

    async def frames(self) -> AsyncIterator[bytes]:
        while True:
            if self._closed and self._capture.empty():
                return
            frame = await self._capture.get()
            if frame is None:
                return
            yield frame

    def play(self, pcm: bytes) -> None:
        if self._closed or self._playback_paused or not pcm:
            return
        self._playback.append(bytes(pcm))

    def pending_playback(self) -> int:
        return sum(len(chunk) for chunk in self._playback)

    def drain_playback(self) -> bytes:
        out = b"".join(self._playback)
        self._playback.clear()
        return out

    def interrupt(self) -> None:
        self.interrupts += 1
        dropped = self.pending_playback()
        self._playback.clear()
        if dropped:
            logger.debug("playback interrupted; dropped %d buffered bytes", dropped)

    def pause_recording(self) -> None:
        self._recording_paused = True

    def resume_recording(self) -> None:
        self._recording_paused = False

    def pause_playback(self) -> None:
        self._playback_paused = True

    def resume_playback(self) -> None:
        self._playback_paused = False

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._playback.clear()
        self._capture.put_nowait(None)


__all__ = ["BufferedAudioInterface"]
