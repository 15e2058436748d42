"""Roster store access for request handlers."""

from __future__ import annotations

from fastapi import HTTPException, Request, status

from coaching.config.app_config import load_app_config
from coaching.core.models import Student
from coaching.core.roster import RosterStore


def open_configured_store() -> RosterStore:
    """Open the roster from the configured storage location."""
    config = load_app_config()
    return RosterStore.open(config.storage.open_store(), key=config.storage.storage_key)


def get_store(request: Request) -> RosterStore:
    """FastAPI dependency: the application's roster store.

    Opened lazily when the app runs without its lifespan (plain TestClient).
    """
    store = getattr(request.app.state, "store", None)
    if store is None:
        store = open_configured_store()
        request.app.state.store = store
    return store


def get_student_or_404(store: RosterStore, student_id: str) -> Student:
    student = store.get_student(student_id)
    if student is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Student '{student_id}' not found",
        )
    return student
