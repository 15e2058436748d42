"""Pydantic schemas for Web API.

Serialization models for students, exams, books, daily logs and the summary.
"""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, Field

from coaching.core.models import NET_LIMIT, BookStatus


# =============================================================================
# STUDENT SCHEMAS
# =============================================================================


class StudentCreate(BaseModel):
    """Request body for creating a student."""

    name: str = Field(..., min_length=1, max_length=100)


class StudentResponse(BaseModel):
    """Response for a student."""

    id: str
    name: str
    exam_count: int = 0
    book_count: int = 0
    log_count: int = 0
    selected: bool = False


class StudentListResponse(BaseModel):
    """Response for list of students."""

    students: list[StudentResponse]
    count: int
    selected_id: str | None = None


class SelectionResponse(BaseModel):
    """Current selection after a select call."""

    selected_id: str | None


# =============================================================================
# DELETE CONFIRMATION SCHEMAS
# =============================================================================


class DeleteRequestResponse(BaseModel):
    """A delete waiting for confirm or cancel."""

    status: str = "pending"
    target_id: str
    message: str


class DeleteResultResponse(BaseModel):
    """Outcome of confirming or cancelling a pending delete."""

    deleted: bool


# =============================================================================
# EXAM SCHEMAS
# =============================================================================


class ExamCreate(BaseModel):
    """Request body for adding an exam result."""

    exam_name: str = Field(..., min_length=1, max_length=200)
    date: str = Field(..., min_length=1, max_length=32)
    tyt_net: float = Field(default=0.0, ge=-NET_LIMIT, le=NET_LIMIT, allow_inf_nan=False)
    ayt_net: float = Field(default=0.0, ge=-NET_LIMIT, le=NET_LIMIT, allow_inf_nan=False)


class ExamUpdate(BaseModel):
    """Request body for editing an exam. Omitted fields keep their value."""

    exam_name: str | None = Field(default=None, max_length=200)
    date: str | None = Field(default=None, max_length=32)
    tyt_net: float | None = Field(default=None, ge=-NET_LIMIT, le=NET_LIMIT, allow_inf_nan=False)
    ayt_net: float | None = Field(default=None, ge=-NET_LIMIT, le=NET_LIMIT, allow_inf_nan=False)


class ExamResponse(BaseModel):
    """Response for an exam result."""

    id: str
    exam_name: str
    date: str
    tyt_net: float
    ayt_net: float
    total_net: float

    model_config = {"from_attributes": True}


class ExamListResponse(BaseModel):
    """Exams, newest first."""

    exams: list[ExamResponse]
    count: int


# =============================================================================
# BOOK SCHEMAS
# =============================================================================


class BookCreate(BaseModel):
    """Request body for adding a book."""

    name: str = Field(..., min_length=1, max_length=200)
    subject: str = Field(..., min_length=1, max_length=100)
    status: BookStatus | None = None


class BookStatusUpdate(BaseModel):
    """Request body for changing a book's status."""

    status: BookStatus


class BookResponse(BaseModel):
    """Response for a book."""

    id: str
    name: str
    subject: str
    status: BookStatus

    model_config = {"from_attributes": True}


class BookListResponse(BaseModel):
    """Books in insertion order."""

    books: list[BookResponse]
    count: int
    active_count: int


# =============================================================================
# DAILY LOG SCHEMAS
# =============================================================================


class DailyLogCreate(BaseModel):
    """Request body for one day's question counts."""

    date: str = Field(..., min_length=1, max_length=32)
    turkce: int = 0
    matematik: int = 0
    fen: int = 0
    sosyal: int = 0


class QuestionCountResponse(BaseModel):
    subject: str
    count: int

    model_config = {"from_attributes": True}


class DailyLogResponse(BaseModel):
    """Response for a daily log."""

    id: str
    date: str
    questions: list[QuestionCountResponse]
    total_questions: int

    model_config = {"from_attributes": True}


class DailyLogListResponse(BaseModel):
    """Daily logs, newest first."""

    logs: list[DailyLogResponse]
    count: int


# =============================================================================
# SUMMARY SCHEMAS
# =============================================================================


class ChartPointResponse(BaseModel):
    label: str
    tyt_net: float
    ayt_net: float

    model_config = {"from_attributes": True}


class SummaryResponse(BaseModel):
    """Dashboard statistics for one student."""

    student_id: str
    average_daily_questions: int
    total_questions: int
    average_tyt_net: str
    average_ayt_net: str
    active_book_count: int
    chart_sufficient: bool
    chart_message: str = ""
    chart_points: list[ChartPointResponse] = Field(default_factory=list)


# =============================================================================
# HEALTH SCHEMAS
# =============================================================================


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    version: str = "0.1.0"
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
