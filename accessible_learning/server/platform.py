"""Course, homework, user and progress routes.

WHY: Teachers publish courses and homework; students submit work, mark
courses complete and move through tasks. Teachers watch for students who
have stalled on a task. These are plain CRUD operations over the JSON
documents.

HOW: One APIRouter mounted under /api. Handlers are synchronous (FastAPI
runs them in its threadpool) and use JSONStore.update() for every
read-modify-write. Records keep the camelCase keys of the stored JSON.

RULES:
- Every success body carries ``"success": true``
- Unknown IDs return 404; missing required fields return 400
- Updates ignore empty values, except videoUrl which applies whenever sent
- Passwords are never included in a response
- A task counts as stuck when incomplete and idle past STUCK_THRESHOLD_SECONDS
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List

from fastapi import APIRouter, HTTPException

from accessible_learning.config import STUCK_THRESHOLD_SECONDS
from accessible_learning.server.dependencies import StoreDep
from accessible_learning.server.models import (
    CompletionCreate,
    CourseCreate,
    CourseUpdate,
    ErrorResponse,
    HomeworkCreate,
    HomeworkUpdate,
    LoginRequest,
    ProgressUpdate,
    SubmissionCreate,
)
from accessible_learning.storage import (
    COMPLETIONS,
    COURSES,
    HOMEWORK,
    PROGRESS,
    USERS,
    generate_id,
    parse_iso,
    utc_now_iso,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")

_NOT_FOUND = {404: {"model": ErrorResponse, "description": "Record not found"}}
_BAD_REQUEST = {400: {"model": ErrorResponse, "description": "Missing required fields"}}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _find_index(records: List[Dict[str, Any]], record_id: str, label: str) -> int:
    for i, record in enumerate(records):
        if record.get("id") == record_id:
            return i
    raise HTTPException(status_code=404, detail="{} not found: {}".format(label, record_id))


def _apply_changes(record: Dict[str, Any], changes: Dict[str, Any]) -> Dict[str, Any]:
    """Overlay truthy values onto a stored record and stamp updatedAt."""
    updated = dict(record)
    for key, value in changes.items():
        if value:
            updated[key] = value
    updated["updatedAt"] = utc_now_iso()
    return updated


def _public_user(user: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in user.items() if key != "password"}


# ---------------------------------------------------------------------------
# Courses
# ---------------------------------------------------------------------------


@router.get("/courses", tags=["courses"], summary="List all courses")
def list_courses(store: StoreDep) -> Dict[str, Any]:
    return {"success": True, "courses": store.read(COURSES)["courses"]}


@router.get(
    "/courses/{course_id}",
    tags=["courses"],
    summary="Get one course",
    responses=_NOT_FOUND,
)
def get_course(course_id: str, store: StoreDep) -> Dict[str, Any]:
    courses = store.read(COURSES)["courses"]
    index = _find_index(courses, course_id, "Course")
    return {"success": True, "course": courses[index]}


@router.post("/courses", tags=["courses"], summary="Create a course")
def create_course(body: CourseCreate, store: StoreDep) -> Dict[str, Any]:
    course = {
        "id": generate_id("course"),
        "title": body.title,
        "description": body.description,
        "content": body.content,
        "videoUrl": body.video_url or "",
        "aiToolLinks": body.ai_tool_links or [],
        "tasks": body.tasks or [],
        "createdAt": utc_now_iso(),
        "createdBy": body.created_by or "teacher_001",
        "status": "active",
    }
    with store.update(COURSES) as document:
        document["courses"].append(course)

    logger.info("Created course %s", course["id"])
    return {"success": True, "course": course}


@router.put(
    "/courses/{course_id}",
    tags=["courses"],
    summary="Update a course",
    responses=_NOT_FOUND,
)
def update_course(course_id: str, body: CourseUpdate, store: StoreDep) -> Dict[str, Any]:
    with store.update(COURSES) as document:
        courses = document["courses"]
        index = _find_index(courses, course_id, "Course")
        updated = _apply_changes(courses[index], {
            "title": body.title,
            "description": body.description,
            "content": body.content,
            "aiToolLinks": body.ai_tool_links,
            "tasks": body.tasks,
        })
        if body.video_url is not None:
            updated["videoUrl"] = body.video_url
        courses[index] = updated

    return {"success": True, "course": updated}


@router.delete(
    "/courses/{course_id}",
    tags=["courses"],
    summary="Delete a course",
    responses=_NOT_FOUND,
)
def delete_course(course_id: str, store: StoreDep) -> Dict[str, Any]:
    with store.update(COURSES) as document:
        courses = document["courses"]
        del courses[_find_index(courses, course_id, "Course")]

    logger.info("Deleted course %s", course_id)
    return {"success": True, "message": "Course deleted"}


# ---------------------------------------------------------------------------
# Homework
# ---------------------------------------------------------------------------


@router.get("/homework", tags=["homework"], summary="List all homework")
def list_homework(store: StoreDep) -> Dict[str, Any]:
    return {"success": True, "homework": store.read(HOMEWORK)["homework"]}


@router.get(
    "/homework/{homework_id}",
    tags=["homework"],
    summary="Get one homework assignment",
    responses=_NOT_FOUND,
)
def get_homework(homework_id: str, store: StoreDep) -> Dict[str, Any]:
    homework = store.read(HOMEWORK)["homework"]
    index = _find_index(homework, homework_id, "Homework")
    return {"success": True, "homework": homework[index]}


@router.post("/homework", tags=["homework"], summary="Create a homework assignment")
def create_homework(body: HomeworkCreate, store: StoreDep) -> Dict[str, Any]:
    homework = {
        "id": generate_id("hw"),
        "title": body.title,
        "description": body.description,
        "courseId": body.course_id or "",
        "deadline": body.deadline,
        "aiToolLinks": body.ai_tool_links or [],
        "tasks": body.tasks or [],
        "createdAt": utc_now_iso(),
        "createdBy": body.created_by or "teacher_001",
        "status": "active",
    }
    with store.update(HOMEWORK) as document:
        document["homework"].append(homework)

    logger.info("Created homework %s", homework["id"])
    return {"success": True, "homework": homework}


@router.put(
    "/homework/{homework_id}",
    tags=["homework"],
    summary="Update a homework assignment",
    responses=_NOT_FOUND,
)
def update_homework(homework_id: str, body: HomeworkUpdate, store: StoreDep) -> Dict[str, Any]:
    with store.update(HOMEWORK) as document:
        homework = document["homework"]
        index = _find_index(homework, homework_id, "Homework")
        homework[index] = _apply_changes(homework[index], {
            "title": body.title,
            "description": body.description,
            "deadline": body.deadline,
            "aiToolLinks": body.ai_tool_links,
            "tasks": body.tasks,
        })
        updated = homework[index]

    return {"success": True, "homework": updated}


@router.delete(
    "/homework/{homework_id}",
    tags=["homework"],
    summary="Delete a homework assignment",
    responses=_NOT_FOUND,
)
def delete_homework(homework_id: str, store: StoreDep) -> Dict[str, Any]:
    with store.update(HOMEWORK) as document:
        homework = document["homework"]
        del homework[_find_index(homework, homework_id, "Homework")]

    logger.info("Deleted homework %s", homework_id)
    return {"success": True, "message": "Homework deleted"}


# ---------------------------------------------------------------------------
# Submissions and completions
# ---------------------------------------------------------------------------


@router.get("/submissions", tags=["homework"], summary="List all submissions")
def list_submissions(store: StoreDep) -> Dict[str, Any]:
    return {"success": True, "submissions": store.read(HOMEWORK)["submissions"]}


@router.post("/submissions", tags=["homework"], summary="Submit homework")
def create_submission(body: SubmissionCreate, store: StoreDep) -> Dict[str, Any]:
    submission = {
        "id": generate_id("sub"),
        "homeworkId": body.homework_id,
        "studentId": body.student_id or "student_001",
        "note": body.note or "",
        "files": body.files or [],
        "submittedAt": utc_now_iso(),
        "status": "submitted",
    }
    with store.update(HOMEWORK) as document:
        document["submissions"].append(submission)

    logger.info("Student %s submitted %s", submission["studentId"], submission["homeworkId"])
    return {"success": True, "submission": submission}


@router.post("/course-completion", tags=["courses"], summary="Record a course completion")
def record_completion(body: CompletionCreate, store: StoreDep) -> Dict[str, Any]:
    completion = {
        "id": generate_id("completion"),
        "courseId": body.course_id,
        "completedAt": body.completed_at or utc_now_iso(),
        "userMode": body.user_mode or "hearing",
    }
    with store.update(COMPLETIONS) as document:
        document["completions"].append(completion)

    return {"success": True, "completion": completion}


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


@router.post(
    "/login",
    tags=["users"],
    summary="Log in with username and password",
    responses={
        **_BAD_REQUEST,
        401: {"model": ErrorResponse, "description": "Wrong username or password"},
    },
)
def login(body: LoginRequest, store: StoreDep) -> Dict[str, Any]:
    if not body.username or not body.password:
        raise HTTPException(status_code=400, detail="Username and password are required")

    for user in store.read(USERS)["users"]:
        if user.get("username") == body.username and user.get("password") == body.password:
            logger.info("User %s logged in", user.get("id"))
            return {"success": True, "user": _public_user(user)}

    raise HTTPException(status_code=401, detail="Invalid username or password")


@router.get(
    "/user/{user_id}",
    tags=["users"],
    summary="Get a user's profile",
    responses=_NOT_FOUND,
)
def get_user(user_id: str, store: StoreDep) -> Dict[str, Any]:
    users = store.read(USERS)["users"]
    index = _find_index(users, user_id, "User")
    return {"success": True, "user": _public_user(users[index])}


# ---------------------------------------------------------------------------
# Progress
# ---------------------------------------------------------------------------


@router.post(
    "/progress/update",
    tags=["progress"],
    summary="Record a visit to or completion of a course task",
    responses=_BAD_REQUEST,
)
def update_progress(body: ProgressUpdate, store: StoreDep) -> Dict[str, Any]:
    if not body.student_id or not body.course_id or body.task_index is None:
        raise HTTPException(
            status_code=400,
            detail="Missing required fields: studentId, courseId, taskIndex",
        )

    now = utc_now_iso()
    completing = body.action == "complete"

    with store.update(PROGRESS) as document:
        record = next(
            (
                p for p in document["progress"]
                if p.get("studentId") == body.student_id
                and p.get("courseId") == body.course_id
                and p.get("taskIndex") == body.task_index
            ),
            None,
        )
        if record is not None:
            record["lastActivity"] = now
            record["visitCount"] = (record.get("visitCount") or 1) + 1
            if completing:
                record["completed"] = True
                record["completedAt"] = now
        else:
            record = {
                "studentId": body.student_id,
                "courseId": body.course_id,
                "taskIndex": body.task_index,
                "startTime": now,
                "lastActivity": now,
                "visitCount": 1,
                "completed": completing,
                "completedAt": now if completing else None,
            }
            document["progress"].append(record)

    return {"success": True, "progress": record}


@router.get("/progress/all", tags=["progress"], summary="List all progress records")
def list_progress(store: StoreDep) -> Dict[str, Any]:
    return {"success": True, "progress": store.read(PROGRESS)["progress"]}


@router.get(
    "/progress/stuck",
    tags=["progress"],
    summary="List students idle on an unfinished task",
)
def list_stuck_students(store: StoreDep) -> Dict[str, Any]:
    cutoff = datetime.now(timezone.utc) - timedelta(seconds=STUCK_THRESHOLD_SECONDS)
    stuck = []
    for record in store.read(PROGRESS)["progress"]:
        if record.get("completed"):
            continue
        last_activity = record.get("lastActivity")
        if not last_activity:
            continue
        try:
            idle_since = parse_iso(str(last_activity))
        except ValueError:
            logger.warning("Skipping progress record with bad lastActivity %r", last_activity)
            continue
        if idle_since < cutoff:
            stuck.append(record)

    return {"success": True, "stuckStudents": stuck}
