"""Async HTTP client for the AssemblyAI speech-to-text API.

WHY: Caption generation submits a course video URL for transcription,
polls until the job is done and reads the word timestamps. Live captions
need a short-lived realtime token so the browser never sees the API key.
This module puts those calls behind one client class.

HOW: Wraps httpx.AsyncClient with the ``authorization`` header AssemblyAI
expects. The client is an async context manager; callers construct it
explicitly (or through an injected factory) rather than sharing a global
key or socket. Each API call is a separate method.

RULES:
- Always use the async context manager (async with AssemblyAIClient() as client:)
- api_key defaults to load_api_key(), which raises ValueError when unset
- Polling uses exponential backoff: 2s initial, 1.5x factor, 15s max, 60min timeout
- Non-2xx responses and malformed 2xx bodies raise AssemblyAIAPIError
- ``transport`` is for tests (httpx.MockTransport); production leaves it None
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from typing import List, Optional

import httpx

from accessible_learning.api.models import TranscriptStatus
from accessible_learning.config import (
    ASSEMBLYAI_BASE_URL,
    DEFAULT_LANGUAGE_CODE,
    DEFAULT_SPEECH_MODELS,
    REALTIME_TOKEN_EXPIRES_IN,
    load_api_key,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_POLL_INITIAL_INTERVAL_S = 2.0
_POLL_BACKOFF_FACTOR = 1.5
_POLL_MAX_INTERVAL_S = 15.0
_POLL_TIMEOUT_S = 60 * 60  # 60 minutes


class AssemblyAIAPIError(Exception):
    """Raised when the AssemblyAI API returns an error response.

    RULES:
    - Always include status_code and message
    - message is the response body text or a summary
    """

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"AssemblyAI API error {status_code}: {message}")


class TranscriptionError(Exception):
    """Raised when a transcript job enters the "error" status."""


class TranscriptionTimeoutError(TimeoutError):
    """Raised when polling exceeds the maximum timeout."""


def _parse_status(resp: httpx.Response) -> TranscriptStatus:
    """Parse a transcript body, treating a malformed 2xx body as an API error."""
    try:
        return TranscriptStatus.from_dict(resp.json())
    except (ValueError, KeyError, TypeError) as exc:
        raise AssemblyAIAPIError(
            resp.status_code, "Unexpected response body: {}".format(resp.text)
        ) from exc


class AssemblyAIClient:
    """Async client for AssemblyAI transcripts and realtime tokens.

    RULES:
    - Use as: async with AssemblyAIClient() as client: ...
    - base_url defaults to ASSEMBLYAI_BASE_URL from config
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._api_key = api_key or load_api_key()
        self._base_url = (base_url or ASSEMBLYAI_BASE_URL).rstrip("/")
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> AssemblyAIClient:
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers={"authorization": self._api_key},
            timeout=httpx.Timeout(60.0, connect=10.0),
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        if self._client:
            await self._client.aclose()
            self._client = None

    def _ensure_client(self) -> httpx.AsyncClient:
        """Return the active httpx client, raising if not in context manager."""
        if self._client is None:
            raise RuntimeError(
                "AssemblyAIClient must be used as an async context manager: "
                "async with AssemblyAIClient() as client: ..."
            )
        return self._client

    # ------------------------------------------------------------------
    # Batch transcription
    # ------------------------------------------------------------------

    async def submit_transcript(
        self,
        audio_url: str,
        language_code: Optional[str] = None,
        speech_models: Optional[List[str]] = None,
    ) -> TranscriptStatus:
        """Submit a media URL for transcription.

        HOW: POST /transcript with the audio URL, language and model list.
        The job starts out "queued"; poll with get_transcript().

        Args:
            audio_url: Publicly reachable URL of the course video or audio.
            language_code: Spoken language (default from config, "zh").
            speech_models: AssemblyAI model names (default ["universal-2"]).

        Returns:
            The newly created job's status.
        """
        client = self._ensure_client()
        body = {
            "audio_url": audio_url,
            "language_code": language_code or DEFAULT_LANGUAGE_CODE,
            "speech_models": speech_models or list(DEFAULT_SPEECH_MODELS),
        }

        resp = await client.post("/transcript", json=body)
        if resp.status_code not in (200, 201):
            raise AssemblyAIAPIError(resp.status_code, resp.text)

        status = _parse_status(resp)
        logger.info("Submitted transcript %s for %s", status.id, audio_url)
        return status

    async def get_transcript(self, transcript_id: str) -> TranscriptStatus:
        """Fetch the current status (and, once completed, the words) of a job."""
        client = self._ensure_client()

        resp = await client.get(f"/transcript/{transcript_id}")
        if resp.status_code != 200:
            raise AssemblyAIAPIError(resp.status_code, resp.text)

        return _parse_status(resp)

    async def poll_until_complete(
        self,
        transcript_id: str,
        on_status: Optional[Callable[[str], None]] = None,
    ) -> TranscriptStatus:
        """Poll a transcript job until it completes or fails.

        HOW: Exponential backoff polling: starts at 2s intervals, grows
        by 1.5x per poll, capped at 15s. Total timeout is 60 minutes.

        RULES:
        - Returns the TranscriptStatus when status is "completed"
        - Raises TranscriptionError when status is "error"
        - Raises TranscriptionTimeoutError after 60 minutes
        """
        interval = _POLL_INITIAL_INTERVAL_S
        start_time = time.monotonic()

        while True:
            elapsed = time.monotonic() - start_time
            if elapsed > _POLL_TIMEOUT_S:
                raise TranscriptionTimeoutError(
                    f"Transcript {transcript_id} timed out after "
                    f"{elapsed:.0f}s (limit: {_POLL_TIMEOUT_S}s)"
                )

            status = await self.get_transcript(transcript_id)
            if on_status:
                on_status(status.status)

            if status.status == "completed":
                return status

            if status.status == "error":
                raise TranscriptionError(f"Transcription failed: {status.error}")

            await asyncio.sleep(interval)
            interval = min(interval * _POLL_BACKOFF_FACTOR, _POLL_MAX_INTERVAL_S)

    # ------------------------------------------------------------------
    # Realtime
    # ------------------------------------------------------------------

    async def create_realtime_token(self, expires_in: Optional[int] = None) -> str:
        """Mint a temporary token for the browser's realtime WebSocket.

        Args:
            expires_in: Token lifetime in seconds (default 3600).

        Returns:
            The token string.
        """
        client = self._ensure_client()

        resp = await client.post(
            "/realtime/token",
            json={"expires_in": expires_in or REALTIME_TOKEN_EXPIRES_IN},
        )
        if resp.status_code not in (200, 201):
            raise AssemblyAIAPIError(resp.status_code, resp.text)

        try:
            return resp.json()["token"]
        except (ValueError, KeyError, TypeError) as exc:
            raise AssemblyAIAPIError(
                resp.status_code, "Unexpected response body: {}".format(resp.text)
            ) from exc
