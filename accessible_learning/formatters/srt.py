"""SRT caption formatter.

WHY: Video editors and offline players expect SubRip files. SRT uses the
same cue bounds as WebVTT but no header and a comma before milliseconds.
"""

from accessible_learning.captions import SRT
from accessible_learning.formatters.base import CueFormatter


class SRTFormatter(CueFormatter):

    cue_format = SRT
    suffix = ".srt"
    media_type = "application/x-subrip"

    @property
    def name(self) -> str:
        return "SRT"
