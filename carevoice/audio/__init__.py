from .gate import PlaybackGate
from .buffered import BufferedAudioInterface
from .interface import AudioInterface

__all__ = ["AudioInterface", "BufferedAudioInterface", "PlaybackGate"]
