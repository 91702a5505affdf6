from __future__ import annotations

import re
from dataclasses import dataclass

_WHITESPACE_RUN = re.compile(r"(\s+)")


@dataclass(frozen=True, slots=True)
class WordSpan:
    start: int  # offset into the source text
    end: int  # exclusive
    text: str


def segment_words(text: str) -> list[WordSpan]:
    """
    Split text on runs of whitespace into word spans with their source offsets.

    Whitespace runs and the empty leading/trailing pieces are skipped; every
    returned span is non-empty and contains no whitespace.
    """

    spans: list[WordSpan] = []
    pos = 0
    for piece in _WHITESPACE_RUN.split(text):
        start = pos
        pos += len(piece)
        if piece == "" or piece.isspace():
            continue
        spans.append(WordSpan(start=start, end=pos, text=piece))
    return spans
