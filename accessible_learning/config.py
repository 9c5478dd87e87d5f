"""Configuration constants and .env loading.

WHY: The backend, the transcription client and the caption tools all need
shared defaults (data directory, API endpoints, cue bounds). Keeping them
in one module makes them easy to find and override per deployment.

HOW: python-dotenv loads the .env file on import. Constants are plain
module-level values read from the environment with sensible defaults.
load_api_key() gives a clear error when the AssemblyAI key is missing.

RULES:
- The API key is never hardcoded and never returned to browsers
- All defaults can be overridden via environment variables
- Paths are resolved relative to the current working directory
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# ---------------------------------------------------------------------------
# Storage
# ---------------------------------------------------------------------------

DATA_DIR = Path(os.getenv("DATA_DIR", "data"))
"""Directory holding the JSON documents and the subtitles/ folder."""

SUBTITLES_DIRNAME = "subtitles"

# ---------------------------------------------------------------------------
# AssemblyAI transcription service
# ---------------------------------------------------------------------------

ASSEMBLYAI_BASE_URL = os.getenv("ASSEMBLYAI_BASE_URL", "https://api.assemblyai.com/v2")
DEFAULT_LANGUAGE_CODE = os.getenv("DEFAULT_LANGUAGE_CODE", "zh")
DEFAULT_SPEECH_MODELS = ["universal-2"]
REALTIME_TOKEN_EXPIRES_IN = int(os.getenv("REALTIME_TOKEN_EXPIRES_IN", "3600"))

# ---------------------------------------------------------------------------
# Captions
# ---------------------------------------------------------------------------

DEFAULT_MAX_WORDS_PER_CUE = 15
DEFAULT_MAX_CUE_DURATION_MS = 5000
LIVE_CAPTION_TAIL_SECONDS = 3.0
"""Display time given to the last live caption when exporting history."""

# ---------------------------------------------------------------------------
# Progress tracking and HTTP server
# ---------------------------------------------------------------------------

STUCK_THRESHOLD_SECONDS = int(os.getenv("STUCK_THRESHOLD_SECONDS", "300"))
API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("API_PORT", "3000"))


def load_api_key() -> str:
    """Load the AssemblyAI API key from the environment.

    RULES:
    - Raises ValueError if the key is missing or empty
    - Never returns a default/placeholder value
    """
    key = os.getenv("ASSEMBLYAI_API_KEY", "").strip()
    if not key:
        raise ValueError(
            "AssemblyAI API key not configured. "
            "Add ASSEMBLYAI_API_KEY to the .env file in the app folder."
        )
    return key
