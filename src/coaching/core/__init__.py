"""Core state model and derived statistics.

Modules:
- models: Student, ExamResult, Book, DailyLog records
- storage: key-value stores and roster (de)serialization
- roster: RosterStore, the single source of truth
- confirmation: two-phase delete state machine
- aggregator: pure update-and-replace operations and statistics
"""

from coaching.core.models import Book, BookStatus, DailyLog, ExamResult, QuestionCount, Student
from coaching.core.roster import RosterStore
from coaching.core.storage import JsonFileStore, MemoryStore

__all__ = [
    "Book",
    "BookStatus",
    "DailyLog",
    "ExamResult",
    "JsonFileStore",
    "MemoryStore",
    "QuestionCount",
    "RosterStore",
    "Student",
]
