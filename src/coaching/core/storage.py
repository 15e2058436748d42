"""Roster persistence.

Responsibilities:
- Key-value stores holding one serialized value per key
  (JsonFileStore: data/state/<key>.json, MemoryStore: in-process dict)
- Load/save the whole roster as one JSON array under a fixed key

A missing, unparsable or wrongly shaped blob loads as an empty roster.
Individual malformed student records are skipped.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Protocol

import structlog

from coaching.core.models import Student

logger = structlog.get_logger(__name__)

# =============================================================================
# CONSTANTS
# =============================================================================

STORAGE_KEY = "yks-students"
DEFAULT_STATE_DIR = Path("data") / "state"


# =============================================================================
# KEY-VALUE STORES
# =============================================================================


class KeyValueStore(Protocol):
    """Minimal string key-value store."""

    def get_item(self, key: str) -> str | None:
        ...

    def set_item(self, key: str, value: str) -> None:
        ...


class JsonFileStore:
    """Key-value store backed by one file per key in a state directory."""

    def __init__(self, state_dir: Path | None = None) -> None:
        self.state_dir = state_dir if state_dir is not None else DEFAULT_STATE_DIR

    def path_for(self, key: str) -> Path:
        return self.state_dir / f"{key}.json"

    def get_item(self, key: str) -> str | None:
        """Read the raw value for key, None if it was never written.

        Raises:
            OSError: If the file exists but cannot be read
            UnicodeDecodeError: If the file is not valid UTF-8
        """
        path = self.path_for(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set_item(self, key: str, value: str) -> None:
        """Overwrite the value for key.

        Raises:
            OSError: If the state directory or file cannot be written
        """
        self.state_dir.mkdir(parents=True, exist_ok=True)
        self.path_for(key).write_text(value, encoding="utf-8")


class MemoryStore:
    """In-process key-value store."""

    def __init__(self, items: dict[str, str] | None = None) -> None:
        self.items: dict[str, str] = dict(items or {})

    def get_item(self, key: str) -> str | None:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value


# =============================================================================
# ROSTER PERSISTENCE
# =============================================================================


def serialize_roster(students: list[Student]) -> str:
    """Serialize the roster to its stored JSON form."""
    return json.dumps([s.to_dict() for s in students], ensure_ascii=False, indent=2)


def deserialize_roster(raw: str) -> list[Student]:
    """Parse a stored roster blob.

    Raises:
        json.JSONDecodeError: If raw is not valid JSON
        ValueError: If the top-level value is not a list
    """
    data = json.loads(raw)
    if not isinstance(data, list):
        raise ValueError(f"Roster must be a JSON array, got {type(data).__name__}")

    students: list[Student] = []
    for index, item in enumerate(data):
        try:
            students.append(Student.from_dict(item))
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.warning("roster_student_skipped", index=index, error=str(e))
    return students


def load_roster(store: KeyValueStore, key: str = STORAGE_KEY) -> list[Student]:
    """Load the roster, or an empty one if absent or corrupt.

    Args:
        store: Key-value store to read from
        key: Storage key of the roster blob

    Returns:
        List of students (empty if nothing usable is stored)
    """
    try:
        raw = store.get_item(key)
    except (OSError, UnicodeDecodeError) as e:
        logger.error("roster_load_failed", key=key, error=str(e))
        return []

    if raw is None:
        logger.debug("roster_not_found", key=key)
        return []

    try:
        students = deserialize_roster(raw)
    except ValueError as e:
        # json.JSONDecodeError is a ValueError
        logger.warning("roster_corrupt_discarded", key=key, error=str(e))
        return []

    logger.debug("roster_loaded", key=key, students=len(students))
    return students


def save_roster(
    students: list[Student],
    store: KeyValueStore,
    key: str = STORAGE_KEY,
) -> bool:
    """Overwrite the stored roster with the given students.

    Write failures are logged and reported through the return value only.

    Returns:
        True if the write succeeded
    """
    try:
        store.set_item(key, serialize_roster(students))
    except OSError as e:
        logger.error("roster_save_failed", key=key, error=str(e))
        return False

    logger.debug("roster_saved", key=key, students=len(students))
    return True
