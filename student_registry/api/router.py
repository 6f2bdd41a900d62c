"""Main API router aggregating all module routers."""

from fastapi import APIRouter

from student_registry.api.endpoints import students

api_router = APIRouter()

# Students
api_router.include_router(
    students.router,
    prefix="/students",
    tags=["Students"],
)
