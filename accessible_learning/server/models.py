"""Pydantic request/response models for the HTTP API.

WHY: The browser front end sends camelCase JSON bodies with many optional
fields. Typed models document every field in the OpenAPI schema and give
routes snake_case attributes.

HOW: All request models share a base config that generates camelCase
aliases and also accepts snake_case names. Fields the routes validate
themselves (to return the platform's 400 messages rather than a generic
422) are declared Optional.

RULES:
- All models use Field(description=...) for OpenAPI documentation
- Record payloads (tasks, aiToolLinks, files) are passed through unchanged
- Word lists stay raw dicts; the captions layer validates them
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Courses and homework
# ---------------------------------------------------------------------------


class CourseUpdate(_CamelModel):
    """Fields accepted when updating a course. Empty values are ignored."""

    title: Optional[str] = Field(default=None, description="Course title.")
    description: Optional[str] = Field(default=None, description="Short summary.")
    content: Optional[str] = Field(default=None, description="Course body text.")
    video_url: Optional[str] = Field(
        default=None,
        description="Video URL. Applied whenever present, even if empty.",
    )
    ai_tool_links: Optional[List[Any]] = Field(
        default=None, description="Links to AI tools used in the course."
    )
    tasks: Optional[List[Any]] = Field(default=None, description="Ordered course tasks.")


class CourseCreate(CourseUpdate):
    created_by: Optional[str] = Field(
        default=None, description="Teacher ID (default 'teacher_001')."
    )


class HomeworkUpdate(_CamelModel):
    title: Optional[str] = Field(default=None, description="Homework title.")
    description: Optional[str] = Field(default=None, description="Instructions.")
    deadline: Optional[str] = Field(default=None, description="Due date (ISO 8601).")
    ai_tool_links: Optional[List[Any]] = Field(
        default=None, description="Links to AI tools for the assignment."
    )
    tasks: Optional[List[Any]] = Field(default=None, description="Assignment tasks.")


class HomeworkCreate(HomeworkUpdate):
    course_id: Optional[str] = Field(default=None, description="Related course ID.")
    created_by: Optional[str] = Field(
        default=None, description="Teacher ID (default 'teacher_001')."
    )


class SubmissionCreate(_CamelModel):
    homework_id: Optional[str] = Field(default=None, description="Homework being submitted.")
    student_id: Optional[str] = Field(
        default=None, description="Student ID (default 'student_001')."
    )
    note: Optional[str] = Field(default=None, description="Free-text note to the teacher.")
    files: Optional[List[Any]] = Field(default=None, description="Attached file references.")


class CompletionCreate(_CamelModel):
    course_id: Optional[str] = Field(default=None, description="Completed course ID.")
    completed_at: Optional[str] = Field(
        default=None, description="Completion time (default: now)."
    )
    user_mode: Optional[str] = Field(
        default=None,
        description="Accessibility mode used, e.g. 'hearing', 'visual' (default 'hearing').",
    )


# ---------------------------------------------------------------------------
# Users and progress
# ---------------------------------------------------------------------------


class LoginRequest(_CamelModel):
    username: Optional[str] = Field(default=None, description="Login name.")
    password: Optional[str] = Field(default=None, description="Password.")


class ProgressUpdate(_CamelModel):
    student_id: Optional[str] = Field(default=None, description="Student ID.")
    course_id: Optional[str] = Field(default=None, description="Course ID.")
    task_index: Optional[int] = Field(default=None, description="Zero-based task index.")
    action: Optional[str] = Field(
        default=None, description="'complete' marks the task done; anything else is a visit."
    )


# ---------------------------------------------------------------------------
# Subtitles and captions
# ---------------------------------------------------------------------------


class TokenRequest(_CamelModel):
    expires_in: Optional[int] = Field(
        default=None, description="Token lifetime in seconds (default 3600)."
    )


class SubtitleGenerateRequest(_CamelModel):
    video_url: Optional[str] = Field(default=None, description="Public URL of the course video.")
    course_id: Optional[str] = Field(default=None, description="Course the captions belong to.")
    language: Optional[str] = Field(default=None, description="Spoken language code (default 'zh').")


class SubtitleConvertRequest(_CamelModel):
    transcript_id: Optional[str] = Field(default=None, description="Completed transcript ID.")
    course_id: Optional[str] = Field(default=None, description="Course to store captions for.")
    format: Optional[str] = Field(
        default=None, description="Output format key (default 'webvtt')."
    )


class CaptionRenderRequest(_CamelModel):
    words: List[Dict[str, Any]] = Field(
        description="Word timestamps: objects with text, start and end (ms)."
    )
    format: Optional[str] = Field(default=None, description="Output format key (default 'webvtt').")


class HistoryExportRequest(_CamelModel):
    entries: List[Dict[str, Any]] = Field(
        description="Live captions: objects with text and timestamp (seconds)."
    )
    format: Optional[str] = Field(
        default=None, description="'srt' (default) or 'webvtt'."
    )


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class ErrorResponse(BaseModel):
    """Standard error response body."""

    success: bool = Field(default=False, description="Always false for errors.")
    message: str = Field(description="Human-readable error description.")


class HealthResponse(BaseModel):
    status: str = Field(description="Service health status.", json_schema_extra={"example": "ok"})
    version: str = Field(description="API version string.", json_schema_extra={"example": "0.1.0"})
