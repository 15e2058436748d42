"""Entity model for the coaching dashboard.

Records:
- Student: owns exam results, books and daily logs
- ExamResult: TYT/AYT nets of a practice exam (total_net is always derived)
- Book: reading progress with a three-state status
- DailyLog: practice-question counts per subject for one day

JSON mapping uses the camelCase keys of the stored roster blob
(examResults, tytNet, totalQuestions, ...).
"""

from __future__ import annotations

import math
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

# =============================================================================
# CONSTANTS
# =============================================================================

STUDENT_PREFIX = "student"
EXAM_PREFIX = "exam"
BOOK_PREFIX = "book"
LOG_PREFIX = "log"

# Accepted net magnitude at the input surfaces; keeps tyt + ayt finite
NET_LIMIT = 1_000_000.0

# Tracked subjects for daily logs: (form key, display name), in display order
TRACKED_SUBJECTS: tuple[tuple[str, str], ...] = (
    ("turkce", "Türkçe"),
    ("matematik", "Matematik"),
    ("fen", "Fen Bilimleri"),
    ("sosyal", "Sosyal Bilimler"),
)


class BookStatus(str, Enum):
    """Reading status of a book."""

    NOT_STARTED = "Başlanmadı"
    IN_PROGRESS = "Devam Ediyor"
    DONE = "Bitti"

    @classmethod
    def parse(cls, raw: Any) -> BookStatus | None:
        """Parse a status from its stored value or member name.

        Returns None for anything that is not one of the three statuses.
        """
        if isinstance(raw, cls):
            return raw
        if raw is None:
            return None
        text = str(raw).strip()
        for status in cls:
            if text == status.value or text == status.name:
                return status
        return None


def generate_id(prefix: str) -> str:
    """Generate a kind-prefixed unique id.

    Format: {prefix}-{epoch_ms}-{8 hex chars}. The random suffix keeps ids
    unique when many records are created within the same millisecond.
    """
    return f"{prefix}-{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}"


def to_float(value: Any) -> float:
    """Coerce a form value to float, 0.0 if it is not a finite number."""
    try:
        result = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    if not math.isfinite(result):
        return 0.0
    return result


def to_int(value: Any) -> int:
    """Coerce a form value to int, 0 if it is not a number."""
    if isinstance(value, bool):
        return int(value)
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        pass
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return 0


# =============================================================================
# DATA CLASSES
# =============================================================================


@dataclass
class ExamResult:
    """A practice exam result."""

    id: str
    exam_name: str
    date: str
    tyt_net: float
    ayt_net: float
    total_net: float = 0.0

    def __post_init__(self):
        """total_net is never trusted from input."""
        self.total_net = self.tyt_net + self.ayt_net

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "examName": self.exam_name,
            "date": self.date,
            "tytNet": self.tyt_net,
            "aytNet": self.ayt_net,
            "totalNet": self.total_net,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ExamResult:
        return cls(
            id=str(data["id"]),
            exam_name=str(data.get("examName", "")),
            date=str(data.get("date", "")),
            tyt_net=to_float(data.get("tytNet")),
            ayt_net=to_float(data.get("aytNet")),
        )


@dataclass
class Book:
    """A book tracked for reading progress."""

    id: str
    name: str
    subject: str
    status: BookStatus = BookStatus.NOT_STARTED

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "subject": self.subject,
            "status": self.status.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Book:
        status = BookStatus.parse(data.get("status"))
        if status is None:
            raise ValueError(f"Unknown book status: {data.get('status')!r}")
        return cls(
            id=str(data["id"]),
            name=str(data.get("name", "")),
            subject=str(data.get("subject", "")),
            status=status,
        )


@dataclass
class QuestionCount:
    """Number of questions solved in one subject."""

    subject: str
    count: int

    def to_dict(self) -> dict[str, Any]:
        return {"subject": self.subject, "count": self.count}


@dataclass
class DailyLog:
    """One day's practice-question counts."""

    id: str
    date: str
    questions: list[QuestionCount] = field(default_factory=list)
    total_questions: int = 0

    def __post_init__(self):
        """Drop empty subjects and derive the total."""
        self.questions = [q for q in self.questions if q.count > 0]
        self.total_questions = sum(q.count for q in self.questions)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "date": self.date,
            "questions": [q.to_dict() for q in self.questions],
            "totalQuestions": self.total_questions,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DailyLog:
        questions = [
            QuestionCount(subject=str(q.get("subject", "")), count=to_int(q.get("count")))
            for q in data.get("questions", [])
        ]
        return cls(id=str(data["id"]), date=str(data.get("date", "")), questions=questions)


@dataclass
class Student:
    """A coached student with their exam, book and question records."""

    id: str
    name: str
    exam_results: list[ExamResult] = field(default_factory=list)
    books: list[Book] = field(default_factory=list)
    daily_logs: list[DailyLog] = field(default_factory=list)

    @classmethod
    def create(cls, name: str) -> Student:
        """Create a new student with empty records and a fresh id."""
        return cls(id=generate_id(STUDENT_PREFIX), name=name)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "examResults": [e.to_dict() for e in self.exam_results],
            "books": [b.to_dict() for b in self.books],
            "dailyLogs": [d.to_dict() for d in self.daily_logs],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Student:
        """Rebuild a student from its stored form.

        Raises:
            KeyError, TypeError, ValueError, AttributeError: If the record is malformed
        """
        daily_logs = [DailyLog.from_dict(d) for d in data.get("dailyLogs", [])]
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            exam_results=[ExamResult.from_dict(e) for e in data.get("examResults", [])],
            books=[Book.from_dict(b) for b in data.get("books", [])],
            # a log without positive counts cannot exist
            daily_logs=[log for log in daily_logs if log.questions],
        )
