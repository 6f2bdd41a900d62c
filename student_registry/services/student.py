"""Student registration and search service."""

import logging
import math

from sqlalchemy import ColumnElement, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from student_registry.core.exceptions import StorageError
from student_registry.models.student import Student
from student_registry.schemas.student import (
    StudentCreate,
    StudentResponse,
    StudentSearch,
)

logger = logging.getLogger(__name__)

LIKE_ESCAPE = "\\"


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so the term matches literally."""
    return (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def contains_ci(column, term: str) -> ColumnElement[bool]:
    """Case-insensitive substring match."""
    return column.ilike(f"%{escape_like(term)}%", escape=LIKE_ESCAPE)


def canonical_number(text: str) -> str | None:
    """Return the canonical text of a number, or None if ``text`` isn't one.

    "045", "45.0" and " 45 " all become "45"; "4.50" becomes "4.5".
    """
    try:
        return str(int(text))
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    if number.is_integer():
        return str(int(number))
    return repr(number)


def build_search_filter(criteria: StudentSearch) -> ColumnElement[bool] | None:
    """Build the WHERE clause for a search.

    Supplied criteria are combined with OR, so a record matching any one of
    them is returned. Returns None when no criterion is supplied, meaning
    every record matches.
    """
    conditions: list[ColumnElement[bool]] = []

    if criteria.name:
        conditions.append(contains_ci(Student.name, criteria.name))

    # The search page labels its roll number box "id"
    if criteria.id:
        conditions.append(contains_ci(Student.roll_number, criteria.id))
        number = canonical_number(criteria.id)
        if number is not None:
            conditions.append(Student.roll_number == number)

    if criteria.roll_number:
        conditions.append(contains_ci(Student.roll_number, criteria.roll_number))

    if criteria.father_name:
        conditions.append(contains_ci(Student.father_name, criteria.father_name))

    if not conditions:
        return None
    return or_(*conditions)


class StudentService:
    """Student registration service."""

    def __init__(self, db: Session):
        self.db = db

    def create_student(self, request: StudentCreate) -> StudentResponse:
        """Store a validated registration and return it with its new id."""
        student = Student(**request.model_dump())
        try:
            self.db.add(student)
            self.db.commit()
            self.db.refresh(student)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Failed to save student", extra={"error": str(e)})
            raise StorageError(
                message="Error saving student",
                reason=str(e),
            )

        logger.info(
            "Student saved",
            extra={"student_id": student.id, "roll_number": student.roll_number},
        )
        return StudentResponse.model_validate(student)

    def search_students(self, criteria: StudentSearch) -> list[StudentResponse]:
        """Find students matching any criterion, newest first."""
        query = select(Student)
        where = build_search_filter(criteria)
        if where is not None:
            query = query.where(where)
        query = query.order_by(Student.id.desc())

        if criteria.has_criteria:
            logger.info(
                "Searching students",
                extra={"criteria": criteria.model_dump(exclude_none=True)},
            )
        else:
            logger.info("No search criteria, listing all students")
        try:
            students = self.db.execute(query).scalars().all()
        except SQLAlchemyError as e:
            logger.error("Student search failed", extra={"error": str(e)})
            raise StorageError(
                message="Search Error",
                reason=str(e),
            )

        logger.info("Found %d students", len(students))
        return [StudentResponse.model_validate(s) for s in students]
