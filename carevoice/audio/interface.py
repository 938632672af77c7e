"""Audio I/O owned by one engine for the lifetime of one connection."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator


class AudioInterface(ABC):
    """Microphone capture and speaker playback as PCM16 mono chunks.

    Engines pull captured frames from `frames()` and push synthesized speech
    through `play()`. `interrupt()` drops anything buffered for playback so a
    barge-in takes effect immediately.
    """

    @abstractmethod
    def frames(self) -> AsyncIterator[bytes]: ...

    @abstractmethod
    def play(self, pcm: bytes) -> None: ...

    @abstractmethod
    def interrupt(self) -> None: ...

    def pause_recording(self) -> None:
        return None

    def resume_recording(self) -> None:
        return None

    def pause_playback(self) -> None:
        return None

    def resume_playback(self) -> None:
        return None

    def close(self) -> None:
        return None


__all__ = ["AudioInterface"]
