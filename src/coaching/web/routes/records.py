"""Per-student record endpoints: exams, books, daily logs and summary."""

from fastapi import APIRouter, Depends, HTTPException, status

from coaching.config.app_config import load_app_config
from coaching.core import aggregator
from coaching.core.roster import RosterStore
from coaching.web.schemas import (
    BookCreate,
    BookListResponse,
    BookResponse,
    BookStatusUpdate,
    ChartPointResponse,
    DailyLogCreate,
    DailyLogListResponse,
    DailyLogResponse,
    DeleteRequestResponse,
    DeleteResultResponse,
    ExamCreate,
    ExamListResponse,
    ExamResponse,
    ExamUpdate,
    SummaryResponse,
)
from coaching.web.store import get_store, get_student_or_404

router = APIRouter(prefix="/api", tags=["records"])


def _rejected(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


def _exam_list(exams) -> ExamListResponse:
    ordered = aggregator.sorted_exams(exams)
    return ExamListResponse(
        exams=[ExamResponse.model_validate(e) for e in ordered],
        count=len(ordered),
    )


# =============================================================================
# EXAMS
# =============================================================================


@router.get("/students/{student_id}/exams", response_model=ExamListResponse)
async def list_exams(student_id: str, store: RosterStore = Depends(get_store)) -> ExamListResponse:
    """Exams of a student, newest first."""
    student = get_student_or_404(store, student_id)
    return _exam_list(student.exam_results)


@router.post(
    "/students/{student_id}/exams",
    response_model=ExamListResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_exam(
    student_id: str,
    exam_data: ExamCreate,
    store: RosterStore = Depends(get_store),
) -> ExamListResponse:
    """Add an exam result; returns the re-sorted exam list."""
    student = get_student_or_404(store, student_id)
    updated = aggregator.add_exam(
        student,
        exam_data.exam_name,
        exam_data.date,
        exam_data.tyt_net,
        exam_data.ayt_net,
    )
    if updated is student:
        raise _rejected("Exam name and date are required")
    store.update_student(updated)
    return _exam_list(updated.exam_results)


@router.put("/students/{student_id}/exams/{exam_id}", response_model=ExamResponse)
async def update_exam(
    student_id: str,
    exam_id: str,
    exam_data: ExamUpdate,
    store: RosterStore = Depends(get_store),
) -> ExamResponse:
    """Edit an exam result; total net is recomputed."""
    student = get_student_or_404(store, student_id)
    if aggregator.find_exam(student, exam_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Exam '{exam_id}' not found",
        )

    updated = aggregator.edit_exam(
        student,
        exam_id,
        exam_name=exam_data.exam_name,
        exam_date=exam_data.date,
        tyt_net=exam_data.tyt_net,
        ayt_net=exam_data.ayt_net,
    )
    if updated is student:
        raise _rejected("Exam name and date must not be blank")
    store.update_student(updated)
    return ExamResponse.model_validate(aggregator.find_exam(updated, exam_id))


@router.post(
    "/students/{student_id}/exams/{exam_id}/delete-request",
    response_model=DeleteRequestResponse,
)
async def request_delete_exam(
    student_id: str,
    exam_id: str,
    store: RosterStore = Depends(get_store),
) -> DeleteRequestResponse:
    """Ask for an exam delete; it happens only after confirm."""
    get_student_or_404(store, student_id)
    exam = store.request_exam_delete(student_id, exam_id)
    if exam is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Exam '{exam_id}' not found",
        )
    return DeleteRequestResponse(
        target_id=exam.id,
        message="Bu deneme sonucunu silmek istediğinizden emin misiniz? Bu işlem geri alınamaz.",
    )


@router.post("/exams/delete/confirm", response_model=DeleteResultResponse)
async def confirm_delete_exam(store: RosterStore = Depends(get_store)) -> DeleteResultResponse:
    """Delete the exam awaiting confirmation."""
    return DeleteResultResponse(deleted=store.confirm_exam_delete())


@router.post("/exams/delete/cancel", response_model=DeleteResultResponse)
async def cancel_delete_exam(store: RosterStore = Depends(get_store)) -> DeleteResultResponse:
    """Discard the pending exam delete."""
    store.cancel_exam_delete()
    return DeleteResultResponse(deleted=False)


# =============================================================================
# BOOKS
# =============================================================================


def _book_list(books) -> BookListResponse:
    return BookListResponse(
        books=[BookResponse.model_validate(b) for b in books],
        count=len(books),
        active_count=aggregator.active_book_count(books),
    )


@router.get("/students/{student_id}/books", response_model=BookListResponse)
async def list_books(student_id: str, store: RosterStore = Depends(get_store)) -> BookListResponse:
    """Books of a student in insertion order."""
    student = get_student_or_404(store, student_id)
    return _book_list(student.books)


@router.post(
    "/students/{student_id}/books",
    response_model=BookListResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_book(
    student_id: str,
    book_data: BookCreate,
    store: RosterStore = Depends(get_store),
) -> BookListResponse:
    """Add a book at the end of the list."""
    student = get_student_or_404(store, student_id)
    updated = aggregator.add_book(student, book_data.name, book_data.subject, book_data.status)
    if updated is student:
        raise _rejected("Book name and subject are required")
    store.update_student(updated)
    return _book_list(updated.books)


@router.put("/students/{student_id}/books/{book_id}/status", response_model=BookResponse)
async def update_book_status(
    student_id: str,
    book_id: str,
    status_data: BookStatusUpdate,
    store: RosterStore = Depends(get_store),
) -> BookResponse:
    """Change a book's reading status."""
    student = get_student_or_404(store, student_id)
    updated = aggregator.update_book_status(student, book_id, status_data.status)
    book = next((b for b in updated.books if b.id == book_id), None)
    if book is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Book '{book_id}' not found",
        )
    if updated is not student:
        store.update_student(updated)
    return BookResponse.model_validate(book)


# =============================================================================
# DAILY LOGS
# =============================================================================


@router.get("/students/{student_id}/logs", response_model=DailyLogListResponse)
async def list_logs(student_id: str, store: RosterStore = Depends(get_store)) -> DailyLogListResponse:
    """Daily logs of a student, newest first."""
    student = get_student_or_404(store, student_id)
    ordered = aggregator.sorted_logs(student.daily_logs)
    return DailyLogListResponse(
        logs=[DailyLogResponse.model_validate(log) for log in ordered],
        count=len(ordered),
    )


@router.post(
    "/students/{student_id}/logs",
    response_model=DailyLogResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_log(
    student_id: str,
    log_data: DailyLogCreate,
    store: RosterStore = Depends(get_store),
) -> DailyLogResponse:
    """Add one day's question counts."""
    student = get_student_or_404(store, student_id)
    updated = aggregator.add_daily_log(
        student,
        log_data.date,
        turkce=log_data.turkce,
        matematik=log_data.matematik,
        fen=log_data.fen,
        sosyal=log_data.sosyal,
    )
    if updated is student:
        raise _rejected("At least one subject needs a positive question count")
    store.update_student(updated)
    return DailyLogResponse.model_validate(updated.daily_logs[-1])


# =============================================================================
# SUMMARY
# =============================================================================


@router.get("/students/{student_id}/summary", response_model=SummaryResponse)
async def get_summary(student_id: str, store: RosterStore = Depends(get_store)) -> SummaryResponse:
    """Dashboard statistics and chart series."""
    student = get_student_or_404(store, student_id)
    dashboard = load_app_config().dashboard
    summary = aggregator.summarize(
        student,
        min_chart_points=dashboard.min_chart_points,
        not_applicable=dashboard.not_applicable,
    )
    return SummaryResponse(
        student_id=student.id,
        average_daily_questions=summary.average_daily_questions,
        total_questions=summary.total_questions,
        average_tyt_net=summary.average_tyt_net,
        average_ayt_net=summary.average_ayt_net,
        active_book_count=summary.active_book_count,
        chart_sufficient=summary.exam_chart.sufficient,
        chart_message=summary.exam_chart.message,
        chart_points=[ChartPointResponse.model_validate(p) for p in summary.exam_chart.points],
    )
