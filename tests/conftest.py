"""Shared test fixtures for the accessible_learning test suite.

WHY: The caption, formatter, client and API tests all need the same
sample transcript words, an isolated data directory and a stand-in for
the AssemblyAI client. Centralizing them keeps every test on the same
data.

HOW: SAMPLE_WORDS mirrors the ``words`` array of a completed AssemblyAI
transcript. FakeAssemblyAIClient implements the client's async surface
in memory. The ``api`` fixture builds a fresh app per test around a
tmp_path store and the fake client.

RULES:
- No test talks to the real AssemblyAI API
- Each test gets its own data directory (tmp_path)
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from accessible_learning.api.models import TranscriptStatus
from accessible_learning.server.app import create_app
from accessible_learning.storage import JSONStore


# ---------------------------------------------------------------------------
# Sample transcript words (AssemblyAI completed-job shape)
# ---------------------------------------------------------------------------

SAMPLE_WORDS: List[Dict[str, Any]] = [
    {"text": "Welcome", "start": 240,  "end": 620,  "confidence": 0.98},
    {"text": "to",      "start": 640,  "end": 720,  "confidence": 0.99},
    {"text": "today's", "start": 740,  "end": 1100, "confidence": 0.95},
    {"text": "lesson",  "start": 1120, "end": 1500, "confidence": 0.97},
    {"text": "on",      "start": 1520, "end": 1600, "confidence": 0.99},
    {"text": "machine", "start": 1620, "end": 2000, "confidence": 0.96},
    {"text": "learning.", "start": 2020, "end": 2600, "confidence": 0.94},
]


def make_words(count: int, span_ms: int = 100, gap_ms: int = 0) -> List[Dict[str, Any]]:
    """Build ``count`` consecutive words named w1..wN, each ``span_ms`` long."""
    words = []
    start = 0
    for i in range(count):
        words.append({"text": "w{}".format(i + 1), "start": start, "end": start + span_ms})
        start += span_ms + gap_ms
    return words


@pytest.fixture
def word_factory():
    """The make_words helper, as a fixture."""
    return make_words


@pytest.fixture
def sample_words() -> List[Dict[str, Any]]:
    return [dict(w) for w in SAMPLE_WORDS]


# ---------------------------------------------------------------------------
# Fake AssemblyAI client
# ---------------------------------------------------------------------------


class FakeAssemblyAIClient:
    """In-memory stand-in for AssemblyAIClient.

    Transcripts are keyed by ID; submit_transcript creates a queued one.
    Every call is recorded in ``calls`` for assertions.
    """

    def __init__(self, transcripts: Optional[Dict[str, Dict[str, Any]]] = None) -> None:
        self.transcripts = transcripts if transcripts is not None else {}
        self.calls: List[tuple] = []
        self.entered = 0
        self.error: Optional[Exception] = None

    async def __aenter__(self) -> FakeAssemblyAIClient:
        self.entered += 1
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        return None

    def _maybe_raise(self) -> None:
        if self.error is not None:
            raise self.error

    async def submit_transcript(self, audio_url, language_code=None, speech_models=None):
        self.calls.append(("submit_transcript", audio_url, language_code))
        self._maybe_raise()
        transcript_id = "tr_{}".format(len(self.transcripts) + 1)
        self.transcripts[transcript_id] = {"id": transcript_id, "status": "queued"}
        return TranscriptStatus.from_dict(self.transcripts[transcript_id])

    async def get_transcript(self, transcript_id):
        self.calls.append(("get_transcript", transcript_id))
        self._maybe_raise()
        return TranscriptStatus.from_dict(self.transcripts[transcript_id])

    async def create_realtime_token(self, expires_in=None):
        self.calls.append(("create_realtime_token", expires_in))
        self._maybe_raise()
        return "rt-token-123"


@pytest.fixture
def fake_client() -> FakeAssemblyAIClient:
    return FakeAssemblyAIClient()


# ---------------------------------------------------------------------------
# Store and API
# ---------------------------------------------------------------------------


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    path = tmp_path / "data"
    path.mkdir()
    return path


@pytest.fixture
def store(data_dir: Path) -> JSONStore:
    return JSONStore(data_dir)


def write_document(data_dir: Path, name: str, document: Dict[str, Any]) -> None:
    (data_dir / "{}.json".format(name)).write_text(json.dumps(document), encoding="utf-8")


@pytest.fixture
def api(store: JSONStore, fake_client: FakeAssemblyAIClient) -> TestClient:
    """TestClient over an app with a tmp_path store and the fake client."""
    app = create_app(store=store, client_factory=lambda: fake_client)
    return TestClient(app)


@pytest.fixture
def seed(data_dir: Path):
    """Write a raw JSON document into the data directory: seed(name, doc)."""
    def _seed(name: str, document: Dict[str, Any]) -> None:
        write_document(data_dir, name, document)
    return _seed
