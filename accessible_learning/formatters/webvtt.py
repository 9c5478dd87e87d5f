"""WebVTT caption formatters.

WHY: HTML5 ``<track>`` elements only accept WebVTT, so this is what the
course player loads. The fixed-chunk variant keeps the older ten-words-
per-cue layout some exported courses were built with.

RULES:
- Header line "WEBVTT", period before milliseconds
- Media type "text/vtt"
"""

from accessible_learning.captions import FIXED_CHUNKS, WEBVTT
from accessible_learning.formatters.base import CueFormatter


class WebVTTFormatter(CueFormatter):
    """Cues of at most 15 words and 5 seconds."""

    cue_format = WEBVTT
    suffix = ".vtt"
    media_type = "text/vtt"

    @property
    def name(self) -> str:
        return "WebVTT"


class FixedChunkFormatter(CueFormatter):
    """Cues of exactly ten words (the last may be shorter), no duration bound."""

    cue_format = FIXED_CHUNKS
    suffix = "-chunks.vtt"
    media_type = "text/vtt"

    @property
    def name(self) -> str:
        return "WebVTT (10-word chunks)"
