"""Roster store.

Single source of truth for the list of students:
- add / remove / update / select students
- Every roster mutation saves the whole roster synchronously
- Pending two-phase deletes for students and exams

Lifecycle:
    store = RosterStore.open(JsonFileStore(Path("data/state")))
    ...
    store.close()  # final save

Records handed out are copies; changes go through update_student.
"""

from __future__ import annotations

import copy

import structlog

from coaching.core.aggregator import delete_exam, find_exam
from coaching.core.confirmation import DeleteConfirmation
from coaching.core.models import ExamResult, Student
from coaching.core.storage import STORAGE_KEY, KeyValueStore, load_roster, save_roster

logger = structlog.get_logger(__name__)


class RosterStore:
    """In-memory roster synchronized to a key-value store."""

    def __init__(
        self,
        store: KeyValueStore,
        key: str = STORAGE_KEY,
        students: list[Student] | None = None,
    ) -> None:
        self._kv = store
        self._key = key
        self._students: list[Student] = list(students or [])
        self._selected_id: str | None = None
        self.student_deletion: DeleteConfirmation[str] = DeleteConfirmation()
        self.exam_deletion: DeleteConfirmation[tuple[str, str]] = DeleteConfirmation()
        self._apply_selection_rule()

    @classmethod
    def open(cls, store: KeyValueStore, key: str = STORAGE_KEY) -> RosterStore:
        """Build a store from the persisted roster (empty if none)."""
        students = load_roster(store, key)
        logger.info("roster_opened", key=key, students=len(students))
        return cls(store, key=key, students=students)

    def close(self) -> None:
        """Final save on shutdown."""
        self._save()
        logger.info("roster_closed", key=self._key, students=len(self._students))

    def __enter__(self) -> RosterStore:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # -------------------------------------------------------------------------
    # Internal helpers
    # -------------------------------------------------------------------------

    def _save(self) -> bool:
        return save_roster(self._students, self._kv, self._key)

    def _index_of(self, student_id: str) -> int | None:
        for i, student in enumerate(self._students):
            if student.id == student_id:
                return i
        return None

    def _apply_selection_rule(self) -> None:
        if not self._students:
            self._selected_id = None
        elif self._selected_id is None:
            self._selected_id = self._students[0].id

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @property
    def selected_id(self) -> str | None:
        return self._selected_id

    def __len__(self) -> int:
        return len(self._students)

    def list_students(self) -> list[Student]:
        """All students in insertion order."""
        return copy.deepcopy(self._students)

    def get_student(self, student_id: str) -> Student | None:
        index = self._index_of(student_id)
        if index is None:
            return None
        return copy.deepcopy(self._students[index])

    def get_selected(self) -> Student | None:
        """Currently selected student, None if nothing (or an unknown id) is selected."""
        if self._selected_id is None:
            return None
        return self.get_student(self._selected_id)

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def add_student(self, name: str) -> Student | None:
        """Add a student and select it.

        Returns:
            The new student, or None if the name is blank
        """
        name = (name or "").strip()
        if not name:
            return None

        student = Student.create(name)
        self._students.append(student)
        self._selected_id = student.id
        self._apply_selection_rule()
        self._save()
        logger.info("student_added", student_id=student.id)
        return copy.deepcopy(student)

    def remove_student(self, student_id: str) -> bool:
        """Delete a student and all of their records.

        If the student was selected, the first remaining student becomes
        selected (or nothing when the roster is empty).

        Returns:
            True if a student was removed
        """
        index = self._index_of(student_id)
        if index is None:
            return False

        self._students.pop(index)
        if self._selected_id == student_id:
            self._selected_id = None
        self._apply_selection_rule()
        self._save()
        logger.info("student_removed", student_id=student_id, remaining=len(self._students))
        return True

    def update_student(self, updated: Student) -> bool:
        """Replace the student with the same id.

        Returns:
            True if a student was replaced
        """
        index = self._index_of(updated.id)
        if index is None:
            return False

        self._students[index] = copy.deepcopy(updated)
        self._apply_selection_rule()
        self._save()
        logger.debug("student_updated", student_id=updated.id)
        return True

    def select_student(self, student_id: str | None) -> None:
        """Select a student. The id is not validated."""
        self._selected_id = student_id

    # -------------------------------------------------------------------------
    # Two-phase deletes
    # -------------------------------------------------------------------------

    def request_student_delete(self, student_id: str) -> Student | None:
        """Mark a student for deletion.

        Returns:
            The student awaiting confirmation, or None if the id is unknown
        """
        student = self.get_student(student_id)
        if student is None:
            return None
        self.student_deletion.request(student_id)
        return student

    def confirm_student_delete(self) -> bool:
        """Delete the pending student. Returns True if one was removed."""
        student_id = self.student_deletion.confirm()
        if student_id is None:
            return False
        return self.remove_student(student_id)

    def cancel_student_delete(self) -> None:
        self.student_deletion.cancel()

    def request_exam_delete(self, student_id: str, exam_id: str) -> ExamResult | None:
        """Mark one exam of a student for deletion.

        Returns:
            The exam awaiting confirmation, or None if either id is unknown
        """
        student = self.get_student(student_id)
        if student is None:
            return None
        exam = find_exam(student, exam_id)
        if exam is None:
            return None
        self.exam_deletion.request((student_id, exam_id))
        return exam

    def confirm_exam_delete(self) -> bool:
        """Delete the pending exam. Returns True if one was removed."""
        target = self.exam_deletion.confirm()
        if target is None:
            return False

        student_id, exam_id = target
        student = self.get_student(student_id)
        if student is None:
            return False
        updated = delete_exam(student, exam_id)
        if updated is student:
            return False
        return self.update_student(updated)

    def cancel_exam_delete(self) -> None:
        self.exam_deletion.cancel()
