"""Scores attached to a test-run result by the external scoring worker."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RunScores:
    cosine_sim_score: float | None = None
    bleu_score: float | None = None
    llm_score: float | None = None

    @property
    def is_displayable(self) -> bool:
        # Truthiness, not presence: a 0.0 in any dimension hides all three.
        return bool(self.cosine_sim_score and self.bleu_score and self.llm_score)


__all__ = ["RunScores"]
