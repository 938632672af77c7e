"""Speaker output sink with mute diversion."""

from __future__ import annotations

from .interface import AudioInterface


class PlaybackGate:
    """Every engine writes assistant audio through one gate.

    While muted, writes are diverted to nothing so no audio is produced and
    nothing piles up to be played on unmute.
    """

    def __init__(self, audio: AudioInterface | None = None, *, muted: bool = False) -> None:
        self._audio = audio
        self._muted = bool(muted)
        self.diverted_bytes: int = 0

    @property
    def muted(self) -> bool:
        return self._muted

    def attach(self, audio: AudioInterface | None) -> None:
        self._audio = audio
        if audio is not None and self._muted:
            audio.pause_playback()

    def set_muted(self, muted: bool) -> None:
        self._muted = bool(muted)
        if self._audio is None:
            return
        if self._muted:
            self._audio.interrupt()
            self._audio.pause_playback()
        else:
            self._audio.resume_playback()

    def write(self, pcm: bytes) -> bool:
        if self._audio is None or not pcm:
            return False
        if self._muted:
            self.diverted_bytes += len(pcm)
            return False
        self._audio.play(pcm)
        return True

    def halt(self) -> None:
        if self._audio is not None:
            self._audio.interrupt()


__all__ = ["PlaybackGate"]
