"""Per-utterance transcript accumulation."""

from __future__ import annotations

from collections import deque


class TranscriptAccumulator:
    """Accumulate streaming deltas into one buffer per utterance id.

    Only one utterance is open at a time. Once an id is finished, later deltas
    for it are rejected; a new utterance must use a new id.
    """

    def __init__(self, *, finished_history: int = 256) -> None:
        self._open_id: str | None = None
        self._text: str = ""
        self._finished: set[str] = set()
        self._finished_order: deque[str] = deque()
        self._finished_history = max(1, int(finished_history))

    @property
    def open_id(self) -> str | None:
        return self._open_id

    def text(self, utterance_id: str) -> str:
        if utterance_id != self._open_id:
            return ""
        return self._text

    def is_finished(self, utterance_id: str) -> bool:
        return utterance_id in self._finished

    def append(self, utterance_id: str, delta: str) -> str | None:
        """Add `delta` to `utterance_id` and return the full text so far.

        Returns None when the id was already finished or another id is still
        open (callers finish the open one first).
        """
        if utterance_id in self._finished:
            return None
        if self._open_id is None:
            self._open_id = utterance_id
            self._text = ""
        elif self._open_id != utterance_id:
            return None
        self._text += delta or ""
        return self._text

    def finish(self, utterance_id: str | None = None) -> str | None:
        """Close `utterance_id` (default: the open one) and return its text."""
        target = utterance_id or self._open_id
        if target is None or target in self._finished:
            return None
        text = self._text if target == self._open_id else ""
        if target == self._open_id:
            self._open_id = None
            self._text = ""
        self._finished.add(target)
        self._finished_order.append(target)
        while len(self._finished_order) > self._finished_history:
            self._finished.discard(self._finished_order.popleft())
        return text

    def reset(self) -> None:
        """Drop the open buffer without finishing it."""
        self._open_id = None
        self._text = ""

    def clear(self) -> None:
        self.reset()
        self._finished.clear()
        self._finished_order.clear()


__all__ = ["TranscriptAccumulator"]
