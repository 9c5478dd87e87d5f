"""JSON-file persistence for courses, homework, progress and users."""

from accessible_learning.storage.json_store import (
    JSONStore,
    StorageError,
    generate_id,
    parse_iso,
    utc_now_iso,
)
from accessible_learning.storage.schemas import (
    COMPLETIONS,
    COURSES,
    HOMEWORK,
    PROGRESS,
    USERS,
)

__all__ = [
    "COMPLETIONS",
    "COURSES",
    "HOMEWORK",
    "JSONStore",
    "PROGRESS",
    "StorageError",
    "USERS",
    "generate_id",
    "parse_iso",
    "utc_now_iso",
]
