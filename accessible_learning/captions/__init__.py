"""Caption cue synthesizer: word timestamps to timed-text cues.

WHY: Course videos need captions for hearing-impaired students. The
transcription service gives word-level timestamps; this package groups
them into bounded cues and serializes them as WebVTT or SRT.

HOW: synthesize() does the grouping, render() the serialization and
parse() the reverse. CueFormat bundles the bounds and the output details,
with presets for WebVTT, SRT and fixed ten-word chunks.

RULES:
- Pure functions only: no I/O, no shared state
- Every input word appears in exactly one cue
"""

from accessible_learning.captions.history import CaptionHistory, HistoryEntry
from accessible_learning.captions.models import (
    FIXED_CHUNKS,
    PRESETS,
    SRT,
    WEBVTT,
    Cue,
    CueFormat,
    InvalidInputError,
    Word,
)
from accessible_learning.captions.render import (
    format_timestamp,
    parse,
    parse_timestamp,
    render,
    words_to_captions,
)
from accessible_learning.captions.synthesizer import synthesize, words_from_dicts

__all__ = [
    "CaptionHistory",
    "Cue",
    "CueFormat",
    "FIXED_CHUNKS",
    "HistoryEntry",
    "InvalidInputError",
    "PRESETS",
    "SRT",
    "WEBVTT",
    "Word",
    "format_timestamp",
    "parse",
    "parse_timestamp",
    "render",
    "synthesize",
    "words_from_dicts",
    "words_to_captions",
]
