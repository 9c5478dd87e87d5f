"""Greedy cue synthesis from word-level timestamps.

WHY: A completed transcription job yields hundreds of individual words.
Players need them grouped into short cues that stay on screen for a
readable amount of time. This module does the grouping.

HOW: One left-to-right pass. Words are appended to an open buffer whose
start is the first buffered word's start. After each append the buffer
is flushed if it is full, if it has reached the duration bound, or if
the word is the last one. Flushed cues end at the triggering word's end.

RULES:
- Every input word lands in exactly one cue, in input order
- A single word longer than the duration bound still forms its own cue
- Empty input yields an empty list
- All input is validated before the first cue is built
"""

from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Optional, Sequence, Union

from accessible_learning.captions.models import Cue, InvalidInputError, Word
from accessible_learning.config import (
    DEFAULT_MAX_CUE_DURATION_MS,
    DEFAULT_MAX_WORDS_PER_CUE,
)

WordLike = Union[Word, Mapping[str, Any]]


def words_from_dicts(items: Iterable[Any]) -> List[Word]:
    """Convert raw transcription API word dicts into Word objects.

    Raises:
        InvalidInputError: If any entry lacks text or numeric timestamps.
    """
    if items is None:
        return []
    if isinstance(items, (str, bytes, Mapping)):
        raise InvalidInputError("Expected a list of word objects")
    return [
        item if isinstance(item, Word) else Word.from_dict(item, position)
        for position, item in enumerate(items)
    ]


def synthesize(
    words: Sequence[WordLike],
    max_words_per_cue: int = DEFAULT_MAX_WORDS_PER_CUE,
    max_cue_duration_ms: Optional[int] = DEFAULT_MAX_CUE_DURATION_MS,
) -> List[Cue]:
    """Group words into cues bounded by word count and duration.

    Args:
        words: Ordered Word objects or raw dicts with text/start/end.
        max_words_per_cue: Flush once a cue holds this many words.
        max_cue_duration_ms: Flush once ``word.end - cue_start`` reaches
            this many milliseconds. None disables the duration bound.

    Returns:
        Cues with contiguous 1-based indices.

    Raises:
        InvalidInputError: If any word entry is malformed.
        ValueError: If max_words_per_cue is below 1.
    """
    if max_words_per_cue < 1:
        raise ValueError("max_words_per_cue must be at least 1")

    parsed = words_from_dicts(words)
    if not parsed:
        return []

    cues: List[Cue] = []
    buffer: List[str] = []
    cue_start = parsed[0].start
    last = len(parsed) - 1

    for i, word in enumerate(parsed):
        buffer.append(word.text)

        should_flush = (
            len(buffer) >= max_words_per_cue
            or (
                max_cue_duration_ms is not None
                and word.end - cue_start >= max_cue_duration_ms
            )
            or i == last
        )
        if not should_flush:
            continue

        cues.append(Cue(
            index=len(cues) + 1,
            start_ms=cue_start,
            end_ms=word.end,
            text=" ".join(buffer),
        ))
        buffer = []
        if i < last:
            cue_start = parsed[i + 1].start

    return cues
