"""Abstract base formatter and output container.

WHY: The HTTP API and the CLI both turn the same word list into caption
files of different styles. A shared interface lets them pick a formatter
by key and treat the result generically.

HOW: BaseFormatter is an ABC with a ``name`` property and a ``format()``
method. FormatterOutput bundles a file suffix with its content and MIME
type. CueFormatter covers every style that is "synthesize with some
bounds, render with some separator" so concrete formatters only declare
their CueFormat, suffix and media type.

RULES:
- Subclasses MUST implement ``name`` and ``format()``
- ``format()`` returns a list, even for single-file formatters
- ``suffix`` is appended to a caller-chosen stem, e.g. ``".vtt"``
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Sequence

from accessible_learning.captions import CueFormat, render, synthesize
from accessible_learning.captions.synthesizer import WordLike


@dataclass
class FormatterOutput:
    """One output file produced by a formatter.

    Attributes:
        suffix: File suffix appended to the stem, e.g. ``".vtt"`` →
                ``"course_1_subtitles.vtt"``.
        content: The file content.
        media_type: MIME type for the content, e.g. ``"text/vtt"``.
    """

    suffix: str
    content: str
    media_type: str


class BaseFormatter(ABC):
    """Abstract base for all caption output formatters.

    Attributes:
        suffix: File suffix of the output, e.g. ``".vtt"``.
        media_type: MIME type of the output, e.g. ``"text/vtt"``.

    To add a new output format:
    1. Create a new file in formatters/
    2. Subclass BaseFormatter (or CueFormatter)
    3. Register it in FORMATTERS in formatters/__init__.py
    """

    suffix: str
    media_type: str

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable format name, e.g. 'WebVTT'."""

    @abstractmethod
    def format(self, words: Sequence[WordLike]) -> List[FormatterOutput]:
        """Convert timestamped words into one or more output files.

        Raises:
            InvalidInputError: If any word entry is malformed.
        """


class CueFormatter(BaseFormatter):
    """Formatter driven entirely by a CueFormat."""

    cue_format: CueFormat

    def format(self, words: Sequence[WordLike]) -> List[FormatterOutput]:
        fmt = self.cue_format
        cues = synthesize(
            words,
            max_words_per_cue=fmt.max_words_per_cue,
            max_cue_duration_ms=fmt.max_cue_duration_ms,
        )
        return [
            FormatterOutput(
                suffix=self.suffix,
                content=render(cues, fmt),
                media_type=self.media_type,
            )
        ]
