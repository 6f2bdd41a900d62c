"""Student registration and search endpoints."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import HTMLResponse

from student_registry.core.database import DbSession
from student_registry.core.exceptions import ValidationError
from student_registry.schemas.student import StudentSearch
from student_registry.services.rendering import render_results, render_saved
from student_registry.services.student import StudentService
from student_registry.services.validation import validate_submission

router = APIRouter()


async def read_submission(request: Request) -> dict[str, Any]:
    """Read a registration body sent as JSON, urlencoded or multipart form."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        # Invalid JSON and bodies that aren't UTF-8 both raise ValueError
        try:
            body = await request.json()
        except ValueError:
            raise ValidationError("Malformed JSON body")
        if not isinstance(body, dict):
            raise ValidationError("Request body must be a JSON object")
        return body

    form = await request.form()
    return dict(form)


@router.post("", response_class=HTMLResponse)
def create_student(
    submission: Annotated[dict[str, Any], Depends(read_submission)],
    db: DbSession,
):
    """Register a new student."""
    request = validate_submission(submission)
    student = StudentService(db).create_student(request)
    return HTMLResponse(render_saved(student.id))


@router.get("", response_class=HTMLResponse)
def search_students(
    db: DbSession,
    roll_id: Annotated[str | None, Query(alias="id")] = None,
    name: str | None = None,
    father_name: str | None = None,
    roll_number: str | None = None,
):
    """Search students.

    Records matching ANY supplied criterion are returned, newest first.
    ``id`` is the roll number box on the search page: it matches roll numbers
    containing the text and, when it parses as a number, roll numbers equal
    to that number. With no criteria every student is listed.
    """
    criteria = StudentSearch(
        id=roll_id,
        name=name,
        father_name=father_name,
        roll_number=roll_number,
    )
    students = StudentService(db).search_students(criteria)
    return HTMLResponse(render_results(students))
