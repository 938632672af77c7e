"""Token budget monitor.

Counts the tokens of the instructions plus the rendered transcript and trips
once when the count reaches `floor(context_limit * ratio)`. The trip is
one-way: later recomputations over the ceiling report nothing new.
"""

from __future__ import annotations

import math
import logging
from typing import Protocol
from collections.abc import Iterable

import tiktoken

from carevoice.state.messages import Message
from carevoice.config.models import realtime_context_limit
from carevoice.config.limits import TOKENIZER_ENCODING, TOKEN_BUDGET_RATIO

logger = logging.getLogger(__name__)


class Encoder(Protocol):
    def encode(self, text: str) -> list[int]: ...


def render_transcript(instructions: str, messages: Iterable[Message]) -> str:
    return f"{instructions}\n\n" + "\n".join(m.render() for m in messages)


class TokenBudgetMonitor:
    def __init__(
        self,
        *,
        context_limit: int | None = None,
        ratio: float = TOKEN_BUDGET_RATIO,
        encoding: str = TOKENIZER_ENCODING,
        encoder: Encoder | None = None,
    ) -> None:
        limit = context_limit if context_limit else realtime_context_limit()
        self._ceiling = math.floor(limit * ratio)
        self._encoding = encoding
        self._encoder = encoder
        self._token_count = 0
        self._limit_reached = False

    @property
    def ceiling(self) -> int:
        return self._ceiling

    @property
    def token_count(self) -> int:
        return self._token_count

    @property
    def limit_reached(self) -> bool:
        return self._limit_reached

    @property
    def usage_percentage(self) -> float:
        if self._ceiling <= 0:
            return 100.0
        return min(self._token_count / self._ceiling * 100.0, 100.0)

    def _get_encoder(self) -> Encoder:
        if self._encoder is None:
            self._encoder = tiktoken.get_encoding(self._encoding)
        return self._encoder

    def count(self, instructions: str, messages: Iterable[Message]) -> int:
        return len(self._get_encoder().encode(render_transcript(instructions, messages)))

    def update(self, instructions: str, messages: Iterable[Message]) -> bool:
        """Recount and return True only on the first crossing of the ceiling."""
        self._token_count = self.count(instructions, messages)
        if self._limit_reached or self._token_count < self._ceiling:
            return False
        self._limit_reached = True
        logger.info("token budget reached: %d >= %d", self._token_count, self._ceiling)
        return True

    def reset(self) -> None:
        self._token_count = 0
        self._limit_reached = False


__all__ = ["Encoder", "TokenBudgetMonitor", "render_transcript"]
