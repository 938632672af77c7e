"""Conversation phases as seen by the learner."""

from __future__ import annotations

from enum import Enum


class SessionPhase(str, Enum):
    IDLE = "idle"
    CONNECTING = "connecting"
    IDLE_CONNECTED = "idle-connected"
    LISTENING = "listening"
    SPEAKING = "speaking"
    DISCONNECTED = "disconnected"
    LIMIT_REACHED = "limit-reached"


__all__ = ["SessionPhase"]
