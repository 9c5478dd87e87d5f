"""AssemblyAI response dataclasses.

WHY: The transcript endpoints return loosely-typed JSON. Parsing it into
a dataclass at the client boundary gives the routes typed access to the
status, the text and the word list.

HOW: TranscriptStatus.from_dict maps the subset of fields the platform
uses. Words are kept as the raw dicts the API returned so they can be
passed straight through to browsers; caption_words() converts them for
the cue synthesizer.

RULES:
- status is one of "queued", "processing", "completed", "error"
- words is an empty list until the job completes
- error is only set when status is "error"
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from accessible_learning.captions import Word, words_from_dicts


@dataclass
class TranscriptStatus:
    """A transcript job as reported by GET/POST /transcript."""

    id: str
    status: str
    text: Optional[str] = None
    words: List[Dict[str, Any]] = field(default_factory=list)
    confidence: Optional[float] = None
    language_code: Optional[str] = None
    error: Optional[str] = None

    @property
    def is_completed(self) -> bool:
        return self.status == "completed"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> TranscriptStatus:
        return cls(
            id=data["id"],
            status=data["status"],
            text=data.get("text"),
            words=data.get("words") or [],
            confidence=data.get("confidence"),
            language_code=data.get("language_code"),
            error=data.get("error"),
        )

    def caption_words(self) -> List[Word]:
        """Parse the word list for the cue synthesizer.

        Raises:
            InvalidInputError: If the service returned a malformed word.
        """
        return words_from_dicts(self.words)
