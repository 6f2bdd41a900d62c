"""Database models package."""

from student_registry.models.student import INDEXED_FIELDS, Student

__all__ = [
    # Student
    "Student",
    "INDEXED_FIELDS",
]
