"""Data models for the caption cue synthesizer.

WHY: Transcription services return word-level timestamps; players need
numbered, time-ranged cues. Typed dataclasses make both ends of that
conversion explicit and keep the cue bounds in one configuration struct
instead of being scattered across near-duplicate routines.

HOW: Word is the input unit (parsed from raw API dicts with from_dict),
Cue is the output unit, and CueFormat bundles the segmentation bounds
with the serialization details (decimal separator, header line).

RULES:
- Timestamps are integer milliseconds, accepted as-is (no range checks)
- Word.text is never modified, only joined
- Cue indices are 1-based
- Malformed word entries raise InvalidInputError, never get dropped
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from accessible_learning.config import (
    DEFAULT_MAX_CUE_DURATION_MS,
    DEFAULT_MAX_WORDS_PER_CUE,
)


class InvalidInputError(ValueError):
    """Raised when a word entry is missing text or numeric timestamps.

    Raised before any cue is produced, so callers never see partial output.
    """


@dataclass(frozen=True)
class Word:
    """One recognized word with its offsets in the source audio.

    Attributes:
        text: The word text as returned by the transcription service.
        start: Start offset in milliseconds.
        end: End offset in milliseconds.
        confidence: Recognition confidence 0.0–1.0, when provided.
    """

    text: str
    start: int
    end: int
    confidence: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], position: int = 0) -> Word:
        """Parse a Word from a raw transcription API dict.

        RULES:
        - text must be a string; start and end must be numbers
        - bool is rejected even though it is an int subclass
        - float timestamps are truncated to whole milliseconds

        Raises:
            InvalidInputError: naming the offending entry position.
        """
        if not isinstance(data, Mapping):
            raise InvalidInputError(
                "Word {} is not an object: {!r}".format(position, data)
            )

        text = data.get("text")
        if not isinstance(text, str):
            raise InvalidInputError("Word {} is missing 'text'".format(position))

        return cls(
            text=text,
            start=_timestamp(data, "start", position),
            end=_timestamp(data, "end", position),
            confidence=data.get("confidence"),
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"text": self.text, "start": self.start, "end": self.end}
        if self.confidence is not None:
            result["confidence"] = self.confidence
        return result


@dataclass(frozen=True)
class Cue:
    """One timed caption entry."""

    index: int
    start_ms: int
    end_ms: int
    text: str

    @property
    def duration_ms(self) -> int:
        return self.end_ms - self.start_ms


@dataclass(frozen=True)
class CueFormat:
    """Segmentation bounds plus serialization details for one output style.

    WHY: The WebVTT and SRT outputs differ only in the millisecond
    separator and the header line; the fixed-chunk style differs only in
    its bounds. One struct covers all three so there is one code path.

    Attributes:
        max_words_per_cue: Flush a cue once it holds this many words.
        max_cue_duration_ms: Flush once ``word.end - cue_start`` reaches
            this value. None disables the duration bound.
        decimal_separator: Character between seconds and milliseconds.
        header: Signature line written before the cues, or None.
    """

    max_words_per_cue: int = DEFAULT_MAX_WORDS_PER_CUE
    max_cue_duration_ms: Optional[int] = DEFAULT_MAX_CUE_DURATION_MS
    decimal_separator: str = "."
    header: Optional[str] = "WEBVTT"

    def __post_init__(self) -> None:
        if self.max_words_per_cue < 1:
            raise ValueError("max_words_per_cue must be at least 1")
        if self.decimal_separator not in (".", ","):
            raise ValueError(
                "decimal_separator must be '.' or ',', got {!r}".format(
                    self.decimal_separator
                )
            )


WEBVTT = CueFormat()
SRT = CueFormat(decimal_separator=",", header=None)
FIXED_CHUNKS = CueFormat(max_words_per_cue=10, max_cue_duration_ms=None)

PRESETS: Dict[str, CueFormat] = {
    "webvtt": WEBVTT,
    "srt": SRT,
    "fixed_chunks": FIXED_CHUNKS,
}


def _timestamp(data: Mapping[str, Any], key: str, position: int) -> int:
    value = data.get(key)
    if (
        isinstance(value, bool)
        or not isinstance(value, (int, float))
        or not math.isfinite(value)
    ):
        raise InvalidInputError(
            "Word {} has no numeric '{}' timestamp (got {!r})".format(position, key, value)
        )
    return int(value)
