"""AssemblyAI client package: async interface to the transcription service.

RULES:
- All HTTP calls to AssemblyAI go through AssemblyAIClient
- Authentication uses the raw API key in the ``authorization`` header
"""

from accessible_learning.api.client import (
    AssemblyAIAPIError,
    AssemblyAIClient,
    TranscriptionError,
    TranscriptionTimeoutError,
)
from accessible_learning.api.models import TranscriptStatus

__all__ = [
    "AssemblyAIAPIError",
    "AssemblyAIClient",
    "TranscriptStatus",
    "TranscriptionError",
    "TranscriptionTimeoutError",
]
