"""Output formatter registry.

WHY: The CLI and the API select caption styles by name. A central dict
makes adding a style one import and one line.

HOW: FORMATTERS maps string keys to formatter *classes* (not instances).
Callers instantiate as needed: ``formatter = FORMATTERS["webvtt"]()``.

RULES:
- Keys are snake_case identifiers (used in CLI flags and request bodies)
- Every formatter listed here must be importable without side effects
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Type

from accessible_learning.formatters.plain_text import PlainTextFormatter
from accessible_learning.formatters.srt import SRTFormatter
from accessible_learning.formatters.webvtt import FixedChunkFormatter, WebVTTFormatter

if TYPE_CHECKING:
    from accessible_learning.formatters.base import BaseFormatter

DEFAULT_FORMAT = "webvtt"

FORMATTERS: Dict[str, Type[BaseFormatter]] = {
    "webvtt": WebVTTFormatter,
    "srt": SRTFormatter,
    "fixed_chunks": FixedChunkFormatter,
    "plain_text": PlainTextFormatter,
}
