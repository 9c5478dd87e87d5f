"""Caption routes: transcription jobs, caption files and live-caption export.

WHY: Course videos get captions in two ways. Teachers pre-generate them
by submitting the video to AssemblyAI and converting the finished word
timestamps to a caption file. Students watching live get a realtime
token for the browser's WebSocket and can export what was recognized.

HOW: One APIRouter mounted under /api. Handlers are async and open the
injected AssemblyAIClient per request. Conversion goes through the
formatter registry; file writes run in the threadpool.

RULES:
- The raw API key is never sent to the browser (only realtime tokens)
- to-vtt on an unfinished job returns success=false with the job status
- Unknown format keys return 400, malformed words 422
- Caption files are stored as ``<courseId>_subtitles<suffix>``; every WebVTT
  style (webvtt, fixed_chunks) shares the ``.vtt`` file the player loads
- Lookup and download take the same ``format`` key as conversion
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from fastapi import APIRouter, HTTPException, Query
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import FileResponse, Response

from accessible_learning.captions import PRESETS, SRT, CaptionHistory
from accessible_learning.config import SUBTITLES_DIRNAME
from accessible_learning.formatters import DEFAULT_FORMAT, FORMATTERS
from accessible_learning.formatters.base import BaseFormatter
from accessible_learning.server.dependencies import ClientDep, StoreDep
from accessible_learning.server.models import (
    CaptionRenderRequest,
    ErrorResponse,
    HistoryExportRequest,
    SubtitleConvertRequest,
    SubtitleGenerateRequest,
    TokenRequest,
)
from accessible_learning.storage import JSONStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")

_UPSTREAM_ERROR = {502: {"model": ErrorResponse, "description": "AssemblyAI request failed"}}


def _resolve_formatter(key: Optional[str]) -> BaseFormatter:
    key = key or DEFAULT_FORMAT
    if key not in FORMATTERS:
        raise HTTPException(
            status_code=400,
            detail="Unknown output format '{}'. Available: {}".format(
                key, ", ".join(sorted(FORMATTERS.keys()))
            ),
        )
    return FORMATTERS[key]()


def _stored_suffix(formatter: BaseFormatter) -> str:
    if formatter.media_type == "text/vtt":
        return ".vtt"
    return formatter.suffix


def _stored_path(store: JSONStore, course_id: str, key: Optional[str]) -> Tuple[Path, BaseFormatter]:
    formatter = _resolve_formatter(key)
    try:
        path = store.subtitle_path(course_id, _stored_suffix(formatter))
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return path, formatter


def _relative_path(store: JSONStore, filename: str) -> str:
    return "{}/{}/{}".format(store.data_dir.name, SUBTITLES_DIRNAME, filename)


# ---------------------------------------------------------------------------
# AssemblyAI
# ---------------------------------------------------------------------------


@router.post(
    "/assemblyai/token",
    tags=["subtitles"],
    summary="Get a temporary realtime transcription token",
    responses=_UPSTREAM_ERROR,
)
async def create_realtime_token(
    client: ClientDep,
    body: Optional[TokenRequest] = None,
) -> Dict[str, Any]:
    expires_in = body.expires_in if body else None
    async with client:
        token = await client.create_realtime_token(expires_in=expires_in)
    return {"success": True, "token": token}


@router.post(
    "/subtitles/generate",
    tags=["subtitles"],
    summary="Submit a course video for transcription",
    responses={
        400: {"model": ErrorResponse, "description": "Missing videoUrl"},
        **_UPSTREAM_ERROR,
    },
)
async def generate_subtitles(
    body: SubtitleGenerateRequest,
    client: ClientDep,
) -> Dict[str, Any]:
    if not body.video_url:
        raise HTTPException(status_code=400, detail="Missing videoUrl")

    async with client:
        job = await client.submit_transcript(body.video_url, language_code=body.language)

    return {
        "success": True,
        "transcriptId": job.id,
        "status": job.status,
        "courseId": body.course_id,
    }


@router.get(
    "/subtitles/status/{transcript_id}",
    tags=["subtitles"],
    summary="Check a transcription job",
    responses=_UPSTREAM_ERROR,
)
async def get_subtitle_status(transcript_id: str, client: ClientDep) -> Dict[str, Any]:
    async with client:
        job = await client.get_transcript(transcript_id)

    return {
        "success": True,
        "transcriptId": job.id,
        "status": job.status,
        "text": job.text,
        "words": job.words,
    }


@router.post(
    "/subtitles/to-vtt",
    tags=["subtitles"],
    summary="Convert a finished transcript to a stored caption file",
    responses={
        400: {"model": ErrorResponse, "description": "Missing IDs or unknown format"},
        422: {"model": ErrorResponse, "description": "Transcript words are malformed"},
        **_UPSTREAM_ERROR,
    },
)
async def convert_subtitles(
    body: SubtitleConvertRequest,
    client: ClientDep,
    store: StoreDep,
) -> Dict[str, Any]:
    if not body.transcript_id or not body.course_id:
        raise HTTPException(status_code=400, detail="Missing transcriptId or courseId")

    _, formatter = _stored_path(store, body.course_id, body.format)

    async with client:
        job = await client.get_transcript(body.transcript_id)

    if not job.is_completed:
        return {
            "success": False,
            "message": "Transcription is not completed yet",
            "status": job.status,
        }

    output = formatter.format(job.caption_words())[0]
    path = await run_in_threadpool(
        store.save_subtitles, body.course_id, output.content, _stored_suffix(formatter)
    )

    return {
        "success": True,
        "message": "Subtitles generated",
        "filePath": _relative_path(store, path.name),
        "courseId": body.course_id,
    }


# ---------------------------------------------------------------------------
# Stored caption files
# ---------------------------------------------------------------------------


@router.get(
    "/subtitles/{course_id}",
    tags=["subtitles"],
    summary="Check whether a course has a caption file",
)
def get_course_subtitles(
    course_id: str,
    store: StoreDep,
    fmt: Optional[str] = Query(
        default=None,
        alias="format",
        description="Format key the captions were generated with (default 'webvtt').",
    ),
) -> Dict[str, Any]:
    path, _ = _stored_path(store, course_id, fmt)

    if not path.exists():
        return {"success": True, "exists": False, "message": "Subtitle file not found"}

    return {
        "success": True,
        "exists": True,
        "filePath": _relative_path(store, path.name),
    }


@router.get(
    "/subtitles/{course_id}/file",
    tags=["subtitles"],
    summary="Download a course's caption file",
    responses={
        400: {"model": ErrorResponse, "description": "Invalid course id or unknown format"},
        404: {"model": ErrorResponse, "description": "No caption file"},
    },
)
def download_course_subtitles(
    course_id: str,
    store: StoreDep,
    fmt: Optional[str] = Query(
        default=None,
        alias="format",
        description="Format key the captions were generated with (default 'webvtt').",
    ),
) -> FileResponse:
    path, formatter = _stored_path(store, course_id, fmt)

    if not path.exists():
        raise HTTPException(status_code=404, detail="Subtitle file not found")

    return FileResponse(path, media_type=formatter.media_type, filename=path.name)


# ---------------------------------------------------------------------------
# Stateless conversion
# ---------------------------------------------------------------------------


@router.post(
    "/captions/render",
    tags=["captions"],
    summary="Render word timestamps as captions",
    responses={
        400: {"model": ErrorResponse, "description": "Unknown format"},
        422: {"model": ErrorResponse, "description": "Malformed words"},
    },
)
def render_captions(body: CaptionRenderRequest) -> Response:
    formatter = _resolve_formatter(body.format)
    output = formatter.format(body.words)[0]
    return Response(content=output.content, media_type=output.media_type)


@router.post(
    "/captions/history/export",
    tags=["captions"],
    summary="Export live-recognized captions as SRT or WebVTT",
    responses={
        400: {"model": ErrorResponse, "description": "Unknown format"},
        422: {"model": ErrorResponse, "description": "Malformed entries"},
    },
)
def export_caption_history(body: HistoryExportRequest) -> Response:
    key = body.format or "srt"
    if key not in ("srt", "webvtt"):
        raise HTTPException(
            status_code=400,
            detail="Unknown export format '{}'. Available: srt, webvtt".format(key),
        )

    history = CaptionHistory.from_dicts(body.entries)
    fmt = PRESETS.get(key, SRT)
    media_type = "application/x-subrip" if key == "srt" else "text/vtt"
    return Response(content=history.export(fmt), media_type=media_type)
