"""Route handlers for Web API."""

from coaching.web.routes.health import router as health_router
from coaching.web.routes.records import router as records_router
from coaching.web.routes.students import router as students_router

__all__ = [
    "health_router",
    "records_router",
    "students_router",
]
