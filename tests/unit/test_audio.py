from __future__ import annotations

import pytest

from carevoice.audio import PlaybackGate, BufferedAudioInterface


@pytest.mark.asyncio
async def test_frames_fed_while_recording_paused_are_dropped() -> None:
    audio = BufferedAudioInterface()
    audio.pause_recording()
    assert audio.feed(b"\x00\x01") is False
    audio.resume_recording()
    assert audio.feed(b"\x02\x03") is True
    audio.close()

    frames = [frame async for frame in audio.frames()]
    assert frames == [b"\x02\x03"]


@pytest.mark.asyncio
async def test_capture_backlog_drops_oldest_frame() -> None:
    audio = BufferedAudioInterface(max_capture_frames=2)
    for frame in (b"a", b"b", b"c"):
        audio.feed(frame)
    audio.close()

    frames = [frame async for frame in audio.frames()]
    assert frames == [b"b", b"c"]


def test_speaker_mute_diverts_output() -> None:
    audio = BufferedAudioInterface()
    gate = PlaybackGate(audio)

    assert gate.write(b"\x01\x02") is True
    gate.set_muted(True)
    assert audio.pending_playback() == 0
    assert gate.write(b"\x03\x04") is False
    assert gate.diverted_bytes == 2
    assert audio.pending_playback() == 0

    gate.set_muted(False)
    assert gate.write(b"\x05") is True
    assert audio.drain_playback() == b"\x05"


def test_gate_applies_mute_to_newly_attached_audio() -> None:
    gate = PlaybackGate(muted=True)
    audio = BufferedAudioInterface()
    gate.attach(audio)
    assert audio.playback_paused is True


def test_halt_drops_buffered_playback() -> None:
    audio = BufferedAudioInterface()
    gate = PlaybackGate(audio)
    gate.write(b"abc")
    gate.halt()
    assert audio.pending_playback() == 0
    assert audio.interrupts == 1
