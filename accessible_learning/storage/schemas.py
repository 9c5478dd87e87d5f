"""JSON Schemas for the platform's data documents.

WHY: The data files are hand-editable JSON. A typo (an object where a
list belongs, a missing top-level key) would otherwise surface as a
KeyError deep inside a route. Validating on read turns it into one clear
StorageError.

RULES:
- Each document is an object with one or two top-level arrays
- Records must be objects; their fields are not constrained here so
  older records with extra or missing optional keys stay loadable
- DEFAULT_DOCUMENTS gives the content used when a file does not exist
"""

from __future__ import annotations

import copy
from typing import Any, Dict, List

COURSES = "courses"
HOMEWORK = "homework"
COMPLETIONS = "completions"
PROGRESS = "student_progress"
USERS = "users"


def _collection_schema(*keys: str) -> Dict[str, Any]:
    return {
        "type": "object",
        "required": list(keys),
        "properties": {
            key: {"type": "array", "items": {"type": "object"}} for key in keys
        },
    }


_DOCUMENT_KEYS: Dict[str, List[str]] = {
    COURSES: ["courses"],
    HOMEWORK: ["homework", "submissions"],
    COMPLETIONS: ["completions"],
    PROGRESS: ["progress"],
    USERS: ["users"],
}

SCHEMAS: Dict[str, Dict[str, Any]] = {
    name: _collection_schema(*keys) for name, keys in _DOCUMENT_KEYS.items()
}

DEFAULT_DOCUMENTS: Dict[str, Dict[str, List[Any]]] = {
    name: {key: [] for key in keys} for name, keys in _DOCUMENT_KEYS.items()
}


def default_document(name: str) -> Dict[str, Any]:
    """Return a fresh empty document for ``name``."""
    return copy.deepcopy(DEFAULT_DOCUMENTS[name])
