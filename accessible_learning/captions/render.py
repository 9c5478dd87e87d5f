"""Timed-text serialization and parsing for caption cues.

WHY: WebVTT and SRT share one block layout (index, time range, text,
blank line) and differ only in the header and the millisecond separator.
A single renderer parameterized by CueFormat replaces two copies.

HOW: render() writes the optional header then one block per cue.
parse() reads blocks back, accepting either separator, so rendered
captions stored on disk can be reloaded as Cue objects.

RULES:
- Time fields are zero-padded HH:MM:SS<sep>mmm
- Conversion uses integer division only (no float rounding)
- Negative times are written as 00:00:00.000 (timed text has no sign)
- render([]) with a header is the header plus one blank line
- parse(render(cues)) == cues for cues with non-negative times
"""

from __future__ import annotations

import re
from typing import Iterable, List, Optional

from accessible_learning.captions.models import (
    WEBVTT,
    Cue,
    CueFormat,
    InvalidInputError,
)
from accessible_learning.captions.synthesizer import WordLike, synthesize

_TIMESTAMP = r"(\d{2,}):(\d{2}):(\d{2})[.,](\d{3})"
_TIME_RANGE_RE = re.compile(r"^\s*{0}\s*-->\s*{0}".format(_TIMESTAMP))
_BLOCK_SPLIT_RE = re.compile(r"\n{2,}")


def format_timestamp(milliseconds: int, decimal_separator: str = ".") -> str:
    """Format milliseconds as ``HH:MM:SS.mmm`` (or ``,mmm`` for SRT).

    Negative values are clamped to zero.
    """
    milliseconds = max(milliseconds, 0)
    hours = milliseconds // 3_600_000
    minutes = (milliseconds % 3_600_000) // 60_000
    seconds = (milliseconds % 60_000) // 1000
    millis = milliseconds % 1000
    return "{:02d}:{:02d}:{:02d}{}{:03d}".format(
        hours, minutes, seconds, decimal_separator, millis
    )


def parse_timestamp(value: str) -> int:
    """Parse ``HH:MM:SS.mmm`` or ``HH:MM:SS,mmm`` into milliseconds."""
    match = re.fullmatch(_TIMESTAMP, value.strip())
    if match is None:
        raise InvalidInputError("Malformed timestamp: {!r}".format(value))
    hours, minutes, seconds, millis = (int(g) for g in match.groups())
    return hours * 3_600_000 + minutes * 60_000 + seconds * 1000 + millis


def render(cues: Iterable[Cue], fmt: CueFormat = WEBVTT) -> str:
    """Serialize cues into a timed-text document.

    Args:
        cues: Cues in display order.
        fmt: Supplies the header line and the millisecond separator.

    Returns:
        The complete document, each block terminated by a blank line.
    """
    parts: List[str] = []
    if fmt.header:
        parts.append("{}\n\n".format(fmt.header))

    sep = fmt.decimal_separator
    for cue in cues:
        parts.append("{}\n{} --> {}\n{}\n\n".format(
            cue.index,
            format_timestamp(cue.start_ms, sep),
            format_timestamp(cue.end_ms, sep),
            cue.text,
        ))

    return "".join(parts)


def words_to_captions(words: Iterable[WordLike], fmt: CueFormat = WEBVTT) -> str:
    """Synthesize cues with the format's bounds and render them."""
    cues = synthesize(
        list(words),
        max_words_per_cue=fmt.max_words_per_cue,
        max_cue_duration_ms=fmt.max_cue_duration_ms,
    )
    return render(cues, fmt)


def parse(content: str, header: Optional[str] = "WEBVTT") -> List[Cue]:
    """Parse a rendered WebVTT or SRT document back into cues.

    HOW: Splits on blank lines. A leading block starting with the header
    token is skipped. Each remaining block must carry an index line and a
    time-range line; any following lines form the cue text.

    Negative cue times were clamped by render(), so they come back as 0.

    Raises:
        InvalidInputError: If a block lacks a numeric index or time range.
    """
    normalized = content.replace("\r\n", "\n").strip("\n")
    if not normalized:
        return []

    blocks = _BLOCK_SPLIT_RE.split(normalized)
    if header and blocks[0].startswith(header):
        blocks = blocks[1:]

    cues: List[Cue] = []
    for block in blocks:
        lines = block.split("\n")
        if len(lines) < 2:
            raise InvalidInputError("Incomplete cue block: {!r}".format(block))

        index_line = lines[0].strip()
        if not index_line.isdigit():
            raise InvalidInputError("Cue block has no index: {!r}".format(block))

        match = _TIME_RANGE_RE.match(lines[1])
        if match is None:
            raise InvalidInputError("Cue block has no time range: {!r}".format(block))
        start_ms, end_ms = (
            parse_timestamp("{}:{}:{}.{}".format(*match.groups()[i:i + 4]))
            for i in (0, 4)
        )

        cues.append(Cue(
            index=int(index_line),
            start_ms=start_ms,
            end_ms=end_ms,
            text="\n".join(lines[2:]),
        ))

    return cues
