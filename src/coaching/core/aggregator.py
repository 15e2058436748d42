"""Student aggregator.

Pure functions over one Student's records:
- Update-and-replace operations (add/edit/delete exam, add book,
  change book status, add daily log). Each returns a new Student and leaves
  its input untouched; callers hand the result to RosterStore.update_student.
- Sorted views (exam and log tables, descending by date)
- Summary statistics and the exam chart series

Invalid input never raises: the operation returns the student unchanged.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from datetime import date
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Any, Iterable

from coaching.core.models import (
    BOOK_PREFIX,
    EXAM_PREFIX,
    LOG_PREFIX,
    TRACKED_SUBJECTS,
    Book,
    BookStatus,
    DailyLog,
    ExamResult,
    QuestionCount,
    Student,
    generate_id,
    to_float,
    to_int,
)

# =============================================================================
# CONSTANTS
# =============================================================================

NOT_APPLICABLE = "N/A"
MIN_CHART_POINTS = 2
INSUFFICIENT_CHART_MESSAGE = "Grafiği görmek için en az {min_points} deneme sonucu ekleyin."

# tr-TR short month names
MONTHS_TR_SHORT = (
    "Oca", "Şub", "Mar", "Nis", "May", "Haz",
    "Tem", "Ağu", "Eyl", "Eki", "Kas", "Ara",
)


# =============================================================================
# DATES
# =============================================================================


def parse_date(value: str) -> date:
    """Parse a calendar date ("YYYY-MM-DD", any time-of-day part ignored).

    Unparsable values map to date.min so they sort as the oldest entries.
    """
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except ValueError:
        return date.min


def format_date(value: str) -> str:
    """Format a date like tr-TR numeric dates ("10.01.2024")."""
    parsed = parse_date(value)
    if parsed == date.min:
        return str(value)
    return f"{parsed.day:02d}.{parsed.month:02d}.{parsed.year}"


def format_short_date(value: str) -> str:
    """Format a date as a short tr-TR chart label ("10 Oca")."""
    parsed = parse_date(value)
    if parsed == date.min:
        return str(value)
    return f"{parsed.day} {MONTHS_TR_SHORT[parsed.month - 1]}"


def _by_date_descending(items: Iterable[Any]) -> list[Any]:
    # sorted() is stable with reverse=True: same-date items keep list order
    return sorted(items, key=lambda item: parse_date(item.date), reverse=True)


def sorted_exams(exams: Iterable[ExamResult]) -> list[ExamResult]:
    """Exam table order: newest first, ties keep list order."""
    return _by_date_descending(exams)


def sorted_logs(logs: Iterable[DailyLog]) -> list[DailyLog]:
    """Question log table order: newest first, ties keep list order."""
    return _by_date_descending(logs)


# =============================================================================
# EXAMS
# =============================================================================


def add_exam(
    student: Student,
    exam_name: str,
    exam_date: str,
    tyt_net: Any,
    ayt_net: Any,
) -> Student:
    """Add an exam result and re-sort the exams newest first.

    Args:
        student: Student to derive from
        exam_name: Exam name (required)
        exam_date: Exam date, "YYYY-MM-DD" (required)
        tyt_net: TYT net, coerced to float (0 if not a number)
        ayt_net: AYT net, coerced to float (0 if not a number)

    Returns:
        New Student with the exam added, or the input if rejected
    """
    exam_name = (exam_name or "").strip()
    exam_date = (exam_date or "").strip()
    if not exam_name or not exam_date:
        return student

    exam = ExamResult(
        id=generate_id(EXAM_PREFIX),
        exam_name=exam_name,
        date=exam_date,
        tyt_net=to_float(tyt_net),
        ayt_net=to_float(ayt_net),
    )
    return replace(student, exam_results=sorted_exams([*student.exam_results, exam]))


def edit_exam(
    student: Student,
    exam_id: str,
    exam_name: str | None = None,
    exam_date: str | None = None,
    tyt_net: Any = None,
    ayt_net: Any = None,
) -> Student:
    """Replace the fields of one exam, keeping its id and list position.

    Fields left as None keep their current value. total_net is recomputed.
    """
    if exam_name is not None and not exam_name.strip():
        return student
    if exam_date is not None and not exam_date.strip():
        return student

    updated: list[ExamResult] = []
    found = False
    for exam in student.exam_results:
        if exam.id != exam_id:
            updated.append(exam)
            continue
        found = True
        updated.append(
            ExamResult(
                id=exam.id,
                exam_name=exam_name.strip() if exam_name is not None else exam.exam_name,
                date=exam_date.strip() if exam_date is not None else exam.date,
                tyt_net=to_float(tyt_net) if tyt_net is not None else exam.tyt_net,
                ayt_net=to_float(ayt_net) if ayt_net is not None else exam.ayt_net,
            )
        )

    if not found:
        return student
    return replace(student, exam_results=updated)


def delete_exam(student: Student, exam_id: str) -> Student:
    """Remove an exam by id. Unknown ids leave the student unchanged."""
    remaining = [e for e in student.exam_results if e.id != exam_id]
    if len(remaining) == len(student.exam_results):
        return student
    return replace(student, exam_results=remaining)


def find_exam(student: Student, exam_id: str) -> ExamResult | None:
    for exam in student.exam_results:
        if exam.id == exam_id:
            return exam
    return None


# =============================================================================
# BOOKS
# =============================================================================


def add_book(
    student: Student,
    name: str,
    subject: str,
    status: BookStatus | str | None = None,
) -> Student:
    """Append a book (no re-sort). Status defaults to "Başlanmadı"."""
    name = (name or "").strip()
    subject = (subject or "").strip()
    if not name or not subject:
        return student

    if status is None:
        parsed = BookStatus.NOT_STARTED
    else:
        parsed = BookStatus.parse(status)
        if parsed is None:
            return student

    book = Book(id=generate_id(BOOK_PREFIX), name=name, subject=subject, status=parsed)
    return replace(student, books=[*student.books, book])


def update_book_status(student: Student, book_id: str, status: BookStatus | str) -> Student:
    """Change only the status of one book."""
    parsed = BookStatus.parse(status)
    if parsed is None:
        return student
    if not any(b.id == book_id for b in student.books):
        return student

    books = [replace(b, status=parsed) if b.id == book_id else b for b in student.books]
    return replace(student, books=books)


# =============================================================================
# DAILY LOGS
# =============================================================================


def add_daily_log(student: Student, log_date: str, **counts: Any) -> Student:
    """Add one day's question counts.

    Counts are passed by subject form key (turkce, matematik, fen, sosyal);
    missing keys count as 0. Subjects with count <= 0 are dropped and the
    submission is rejected when none remain.

    Example:
        add_daily_log(student, "2024-03-01", matematik=40, fen=25)
    """
    log_date = (log_date or "").strip()
    if not log_date:
        return student

    questions = [
        QuestionCount(subject=subject, count=to_int(counts.get(key, 0)))
        for key, subject in TRACKED_SUBJECTS
    ]
    questions = [q for q in questions if q.count > 0]
    if not questions:
        return student

    log = DailyLog(id=generate_id(LOG_PREFIX), date=log_date, questions=questions)
    return replace(student, daily_logs=[*student.daily_logs, log])


# =============================================================================
# SUMMARY STATISTICS
# =============================================================================


@dataclass
class ChartPoint:
    """One exam on the net progress charts."""

    label: str
    tyt_net: float
    ayt_net: float

    def to_dict(self) -> dict[str, Any]:
        return {"label": self.label, "tyt_net": self.tyt_net, "ayt_net": self.ayt_net}


@dataclass
class ChartSeries:
    """Exam chart data, oldest first.

    When there are too few exams, sufficient is False and the presentation
    shows message instead of a chart.
    """

    points: list[ChartPoint] = field(default_factory=list)
    sufficient: bool = False
    message: str = ""

    @property
    def tyt_series(self) -> list[tuple[str, float]]:
        return [(p.label, p.tyt_net) for p in self.points]

    @property
    def ayt_series(self) -> list[tuple[str, float]]:
        return [(p.label, p.ayt_net) for p in self.points]


@dataclass
class StudentSummary:
    """Dashboard statistics for one student."""

    average_daily_questions: int
    total_questions: int
    average_tyt_net: str
    average_ayt_net: str
    active_book_count: int
    exam_chart: ChartSeries


def total_questions(logs: list[DailyLog]) -> int:
    return sum(log.total_questions for log in logs)


def average_daily_questions(logs: list[DailyLog]) -> int:
    """Mean questions per logged day, rounded half up. 0 without logs."""
    if not logs:
        return 0
    return math.floor(total_questions(logs) / len(logs) + 0.5)


def _average_net(values: list[float], not_applicable: str) -> str:
    if not values:
        return not_applicable
    mean = sum(values) / len(values)
    if not math.isfinite(mean):
        return not_applicable
    # exact halves round away from zero: 80.125 -> "80.13"
    with localcontext() as ctx:
        ctx.prec = 400  # enough digits for any finite float
        return str(Decimal(mean).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def average_tyt_net(exams: list[ExamResult], not_applicable: str = NOT_APPLICABLE) -> str:
    """Mean TYT net with two decimals, or the not-applicable sentinel."""
    return _average_net([e.tyt_net for e in exams], not_applicable)


def average_ayt_net(exams: list[ExamResult], not_applicable: str = NOT_APPLICABLE) -> str:
    """Mean AYT net with two decimals, or the not-applicable sentinel."""
    return _average_net([e.ayt_net for e in exams], not_applicable)


def active_book_count(books: list[Book]) -> int:
    """Books not yet finished."""
    return sum(1 for b in books if b.status != BookStatus.DONE)


def exam_chart_series(
    exams: list[ExamResult],
    min_points: int = MIN_CHART_POINTS,
) -> ChartSeries:
    """Build the chart series, oldest exam first."""
    ordered = sorted(exams, key=lambda e: parse_date(e.date))
    points = [
        ChartPoint(label=format_short_date(e.date), tyt_net=e.tyt_net, ayt_net=e.ayt_net)
        for e in ordered
    ]
    if len(points) < min_points:
        return ChartSeries(
            points=points,
            sufficient=False,
            message=INSUFFICIENT_CHART_MESSAGE.format(min_points=min_points),
        )
    return ChartSeries(points=points, sufficient=True)


def summarize(
    student: Student,
    min_chart_points: int = MIN_CHART_POINTS,
    not_applicable: str = NOT_APPLICABLE,
) -> StudentSummary:
    """Compute all dashboard statistics for a student."""
    return StudentSummary(
        average_daily_questions=average_daily_questions(student.daily_logs),
        total_questions=total_questions(student.daily_logs),
        average_tyt_net=average_tyt_net(student.exam_results, not_applicable),
        average_ayt_net=average_ayt_net(student.exam_results, not_applicable),
        active_book_count=active_book_count(student.books),
        exam_chart=exam_chart_series(student.exam_results, min_chart_points),
    )
