from __future__ import annotations

from dataclasses import dataclass


class LineClearInvariantError(RuntimeError):
    """A single lock cleared more rows than a four-cell piece can touch."""


@dataclass
class ScoringRules:
    line_clear_scores: tuple[int, int, int, int] = (40, 100, 300, 1200)

    def score_for_lines(self, lines: int) -> int:
        if lines == 0:
            return 0
        if 1 <= lines <= len(self.line_clear_scores):
            return self.line_clear_scores[lines - 1]
        raise LineClearInvariantError(f"one lock cleared {lines} rows")
