"""Shared error types for voice sessions."""

from __future__ import annotations

from dataclasses import dataclass


class VoiceError(Exception):
    """Base class for errors raised by engines and the session layer."""


@dataclass(frozen=True, slots=True)
class CredentialsError(VoiceError):
    """Credentials or vendor configuration are missing; not retried."""

    provider: str
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True, slots=True)
class ConnectionTimeoutError(VoiceError):
    """The transport did not report readiness within the bounded wait."""

    provider: str
    timeout_s: float

    def __str__(self) -> str:
        return f"Failed to connect to {self.provider} - connection timeout"


@dataclass(frozen=True, slots=True)
class TransportClosedError(VoiceError):
    """The vendor closed the transport before the session became ready."""

    provider: str

    def __str__(self) -> str:
        return f"{self.provider} closed the connection before the session was ready"


@dataclass(frozen=True, slots=True)
class NotConnectedError(VoiceError):
    """A text turn was sent without a live session."""

    provider: str

    def __str__(self) -> str:
        return f"{self.provider} session not connected"


@dataclass(frozen=True, slots=True)
class PersistenceError(VoiceError):
    """Creating a conversation or appending a message failed."""

    operation: str
    message: str

    def __str__(self) -> str:
        return f"{self.operation}: {self.message}"


__all__ = [
    "ConnectionTimeoutError",
    "CredentialsError",
    "NotConnectedError",
    "PersistenceError",
    "TransportClosedError",
    "VoiceError",
]
