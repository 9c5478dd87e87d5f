"""Flat-file JSON document store.

WHY: The platform is a classroom-scale tool: a few hundred courses and
progress records, one server process. Plain JSON files in a data
directory are easy to back up, inspect and seed by hand, and need no
database server.

HOW: Each named document lives at ``<data_dir>/<name>.json``. Reads
validate against the document's JSON Schema. Writes go to a temp file in
the same directory and are moved into place with os.replace so readers
never see a half-written file. update() wraps read-modify-write in the
store lock.

RULES:
- A missing document reads as its empty default (no error)
- Corrupt JSON or a schema violation raises StorageError
- Files are written as UTF-8 with 2-space indentation
- All mutations go through update() or write() under self._lock
- Subtitle files live in ``<data_dir>/subtitles/``
"""

from __future__ import annotations

import json
import logging
import os
import random
import string
import tempfile
import threading
import time
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

import jsonschema

from accessible_learning.config import DATA_DIR, SUBTITLES_DIRNAME
from accessible_learning.storage.schemas import SCHEMAS, default_document

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.ascii_lowercase + string.digits


class StorageError(Exception):
    """Raised when a data document cannot be read, parsed or written."""


def generate_id(prefix: str) -> str:
    """Return ``<prefix>_<epoch ms>_<9 random base36 chars>``."""
    suffix = "".join(random.choices(_ID_ALPHABET, k=9))
    return "{}_{}_{}".format(prefix, int(time.time() * 1000), suffix)


def utc_now_iso() -> str:
    """Current UTC time as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_iso(value: str) -> datetime:
    """Parse an ISO-8601 timestamp, accepting a trailing ``Z``.

    Naive timestamps are taken to be UTC.
    """
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class JSONStore:
    """Named JSON documents in one directory.

    Attributes:
        data_dir: Directory holding ``<name>.json`` files.
    """

    def __init__(self, data_dir: Optional[Path] = None) -> None:
        self.data_dir = Path(data_dir) if data_dir is not None else DATA_DIR
        self._lock = threading.RLock()

    def path(self, name: str) -> Path:
        if name not in SCHEMAS:
            raise KeyError("Unknown document: {}".format(name))
        return self.data_dir / "{}.json".format(name)

    def read(self, name: str) -> Dict[str, Any]:
        """Load and validate a document.

        Raises:
            StorageError: If the file is unreadable, not JSON, or does not
                match the document schema.
        """
        path = self.path(name)
        with self._lock:
            if not path.exists():
                return default_document(name)
            try:
                with open(path, encoding="utf-8") as f:
                    document = json.load(f)
            except (OSError, json.JSONDecodeError) as exc:
                logger.exception("Failed to read %s", path)
                raise StorageError("Failed to read {} data".format(name)) from exc

        self._validate(name, document)
        return document

    def write(self, name: str, document: Dict[str, Any]) -> None:
        """Validate and atomically replace a document on disk."""
        self._validate(name, document)
        path = self.path(name)

        with self._lock:
            try:
                path.parent.mkdir(parents=True, exist_ok=True)
                fd, tmp_name = tempfile.mkstemp(
                    dir=str(path.parent), prefix=".{}-".format(name), suffix=".tmp"
                )
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(document, f, indent=2, ensure_ascii=False)
                os.replace(tmp_name, path)
            except OSError as exc:
                logger.exception("Failed to write %s", path)
                raise StorageError("Failed to save {} data".format(name)) from exc

    @contextmanager
    def update(self, name: str) -> Iterator[Dict[str, Any]]:
        """Read a document, yield it for mutation, then write it back.

        Nothing is written if the body raises.
        """
        with self._lock:
            document = self.read(name)
            yield document
            self.write(name, document)

    # ------------------------------------------------------------------
    # Subtitle files
    # ------------------------------------------------------------------

    @property
    def subtitles_dir(self) -> Path:
        return self.data_dir / SUBTITLES_DIRNAME

    def subtitle_path(self, course_id: str, suffix: str = ".vtt") -> Path:
        """Return where a course's caption file is stored.

        Raises:
            ValueError: If course_id could escape the subtitles directory.
        """
        if not course_id or "/" in course_id or "\\" in course_id or ".." in course_id:
            raise ValueError("Invalid course id: {!r}".format(course_id))
        return self.subtitles_dir / "{}_subtitles{}".format(course_id, suffix)

    def save_subtitles(self, course_id: str, content: str, suffix: str = ".vtt") -> Path:
        path = self.subtitle_path(course_id, suffix)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        except OSError as exc:
            logger.exception("Failed to write %s", path)
            raise StorageError("Failed to save subtitles") from exc
        logger.info("Saved subtitles for course %s to %s", course_id, path)
        return path

    # ------------------------------------------------------------------
    # Helpers (private)
    # ------------------------------------------------------------------

    @staticmethod
    def _validate(name: str, document: Any) -> None:
        try:
            jsonschema.validate(instance=document, schema=SCHEMAS[name])
        except jsonschema.ValidationError as exc:
            raise StorageError(
                "Invalid {} data: {}".format(name, exc.message)
            ) from exc
