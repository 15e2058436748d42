"""Student endpoints: roster listing, selection and two-phase delete."""

from fastapi import APIRouter, Depends, HTTPException, status

from coaching.core.models import Student
from coaching.core.roster import RosterStore
from coaching.web.schemas import (
    DeleteRequestResponse,
    DeleteResultResponse,
    SelectionResponse,
    StudentCreate,
    StudentListResponse,
    StudentResponse,
)
from coaching.web.store import get_store, get_student_or_404

router = APIRouter(prefix="/api/students", tags=["students"])


def _to_response(student: Student, selected_id: str | None) -> StudentResponse:
    return StudentResponse(
        id=student.id,
        name=student.name,
        exam_count=len(student.exam_results),
        book_count=len(student.books),
        log_count=len(student.daily_logs),
        selected=student.id == selected_id,
    )


@router.get("", response_model=StudentListResponse)
async def list_students(store: RosterStore = Depends(get_store)) -> StudentListResponse:
    """List all students in insertion order."""
    students = [_to_response(s, store.selected_id) for s in store.list_students()]
    return StudentListResponse(
        students=students,
        count=len(students),
        selected_id=store.selected_id,
    )


@router.post("", response_model=StudentResponse, status_code=status.HTTP_201_CREATED)
async def create_student(
    student_data: StudentCreate,
    store: RosterStore = Depends(get_store),
) -> StudentResponse:
    """Create a new student and select it."""
    student = store.add_student(student_data.name)
    if student is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Student name must not be blank",
        )
    return _to_response(student, store.selected_id)


@router.get("/selected", response_model=StudentResponse)
async def get_selected_student(store: RosterStore = Depends(get_store)) -> StudentResponse:
    """Get the currently selected student."""
    student = store.get_selected()
    if student is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No student selected",
        )
    return _to_response(student, store.selected_id)


@router.put("/selected/{student_id}", response_model=SelectionResponse)
async def select_student(
    student_id: str,
    store: RosterStore = Depends(get_store),
) -> SelectionResponse:
    """Select a student (the id is not validated)."""
    store.select_student(student_id)
    return SelectionResponse(selected_id=store.selected_id)


@router.post("/delete/confirm", response_model=DeleteResultResponse)
async def confirm_delete_student(store: RosterStore = Depends(get_store)) -> DeleteResultResponse:
    """Delete the student awaiting confirmation."""
    return DeleteResultResponse(deleted=store.confirm_student_delete())


@router.post("/delete/cancel", response_model=DeleteResultResponse)
async def cancel_delete_student(store: RosterStore = Depends(get_store)) -> DeleteResultResponse:
    """Discard the pending student delete."""
    store.cancel_student_delete()
    return DeleteResultResponse(deleted=False)


@router.get("/{student_id}", response_model=StudentResponse)
async def get_student(
    student_id: str,
    store: RosterStore = Depends(get_store),
) -> StudentResponse:
    """Get a specific student by ID."""
    student = get_student_or_404(store, student_id)
    return _to_response(student, store.selected_id)


@router.post("/{student_id}/delete-request", response_model=DeleteRequestResponse)
async def request_delete_student(
    student_id: str,
    store: RosterStore = Depends(get_store),
) -> DeleteRequestResponse:
    """Ask for a student delete; it happens only after confirm."""
    student = store.request_student_delete(student_id)
    if student is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Student '{student_id}' not found",
        )
    return DeleteRequestResponse(
        target_id=student.id,
        message=(
            f"'{student.name}' adlı öğrenciyi silmek istediğinizden emin misiniz? "
            "Bu işlem geri alınamaz."
        ),
    )
