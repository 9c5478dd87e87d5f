"""Plain text transcript formatter.

WHY: Screen-reader users and students reviewing a lecture often want the
transcript without timecodes. Breaking it at cue boundaries keeps lines
short enough to read aloud one at a time.

HOW: Synthesizes cues with the WebVTT bounds and writes one cue text per
line.

RULES:
- One line per cue, newline-terminated
- Empty input produces an empty string
"""

from typing import List, Sequence

from accessible_learning.captions import WEBVTT, synthesize
from accessible_learning.captions.synthesizer import WordLike
from accessible_learning.formatters.base import BaseFormatter, FormatterOutput


class PlainTextFormatter(BaseFormatter):

    suffix = ".txt"
    media_type = "text/plain"

    @property
    def name(self) -> str:
        return "Plain Text"

    def format(self, words: Sequence[WordLike]) -> List[FormatterOutput]:
        cues = synthesize(
            words,
            max_words_per_cue=WEBVTT.max_words_per_cue,
            max_cue_duration_ms=WEBVTT.max_cue_duration_ms,
        )
        content = "".join("{}\n".format(cue.text) for cue in cues)
        return [
            FormatterOutput(
                suffix=self.suffix,
                content=content,
                media_type=self.media_type,
            )
        ]
