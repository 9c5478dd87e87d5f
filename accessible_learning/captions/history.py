"""Live caption history and export.

WHY: During live recognition the browser only knows *when* each final
phrase was heard (the video's current time), not when it ends. Students
still want to download what was captioned. This module keeps the
recognized phrases and turns them into cues for export.

HOW: Each entry records the phrase text and its media offset in seconds.
A phrase is displayed until the next phrase begins; the final phrase
gets a fixed tail. The resulting cues go through the shared renderer.

RULES:
- Entries keep insertion order (no sorting)
- Offsets are converted to whole milliseconds with round()
- export() defaults to SRT, the format browsers' recorders produce
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping

from accessible_learning.captions.models import SRT, Cue, CueFormat, InvalidInputError
from accessible_learning.captions.render import render
from accessible_learning.config import LIVE_CAPTION_TAIL_SECONDS


@dataclass
class HistoryEntry:
    """One final phrase from live recognition."""

    text: str
    offset_s: float
    recorded_at: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )


class CaptionHistory:
    """Ordered list of recognized phrases with export to timed text."""

    def __init__(self, tail_seconds: float = LIVE_CAPTION_TAIL_SECONDS) -> None:
        self._entries: List[HistoryEntry] = []
        self._tail_seconds = tail_seconds

    @classmethod
    def from_dicts(cls, items: Iterable[Mapping[str, Any]], **kwargs: Any) -> CaptionHistory:
        """Build a history from ``{"text", "timestamp"}`` dicts.

        Raises:
            InvalidInputError: If an entry lacks text or a finite numeric timestamp.
        """
        history = cls(**kwargs)
        for position, item in enumerate(items):
            text = item.get("text") if isinstance(item, Mapping) else None
            offset = item.get("timestamp") if isinstance(item, Mapping) else None
            if not isinstance(text, str):
                raise InvalidInputError("Entry {} is missing 'text'".format(position))
            history.add(text, _offset_seconds(offset, position))
        return history

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> List[HistoryEntry]:
        return list(self._entries)

    def add(self, text: str, offset_s: float) -> HistoryEntry:
        entry = HistoryEntry(text=text, offset_s=offset_s)
        self._entries.append(entry)
        return entry

    def clear(self) -> None:
        self._entries = []

    def to_cues(self) -> List[Cue]:
        """Convert entries to cues ending where the next phrase starts."""
        cues: List[Cue] = []
        for i, entry in enumerate(self._entries):
            if i + 1 < len(self._entries):
                end_s = self._entries[i + 1].offset_s
            else:
                end_s = entry.offset_s + self._tail_seconds
            cues.append(Cue(
                index=i + 1,
                start_ms=round(entry.offset_s * 1000),
                end_ms=round(end_s * 1000),
                text=entry.text,
            ))
        return cues

    def export(self, fmt: CueFormat = SRT) -> str:
        return render(self.to_cues(), fmt)

    def to_dicts(self) -> List[Dict[str, Any]]:
        return [
            {"text": e.text, "timestamp": e.offset_s, "time": e.recorded_at}
            for e in self._entries
        ]


def _offset_seconds(value: Any, position: int) -> float:
    """Validate a media offset so that it converts to whole milliseconds."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            seconds = float(value)
        except OverflowError:
            seconds = math.inf
        if math.isfinite(seconds * 1000):
            return seconds
    raise InvalidInputError(
        "Entry {} has no finite numeric 'timestamp' (got {!r})".format(position, value)
    )
