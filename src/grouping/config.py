from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class AnalysisConfig:
    """
    Output and audit options for a reading-structure pass.

    None of these change how lines are grouped or assigned to pages; the
    new-line heuristic itself has no tunable parameters.
    """

    page_relative_rects: bool = False  # serialize line rects modulo page width
    include_fragments: bool = False  # serialize per-line fragments, not just joined text
    warn_degenerate_fragments: bool = True
    max_degenerate_warnings: int = 50

    def validate(self) -> None:
        if self.max_degenerate_warnings < 0:
            raise ValueError("max_degenerate_warnings must be >= 0")

    def __post_init__(self) -> None:
        self.validate()
