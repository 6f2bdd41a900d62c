"""Student schemas."""

from datetime import datetime

from pydantic import Field, field_validator

from student_registry.schemas.common import BaseSchema


class StudentBase(BaseSchema):
    """Base student schema."""

    roll_number: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    father_name: str = Field(..., min_length=1)
    address: str = Field(..., min_length=1)
    age: int
    phone: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)

    father_phone: str | None = None
    father_email: str | None = None
    eamcet_rank: int | None = None
    ssc_marks: float | None = None
    inter_marks: float | None = None
    achievements: str | None = None
    remarks: str | None = None
    identification_mark: str | None = None
    blood_group: str | None = None


class StudentCreate(StudentBase):
    """Validated registration, ready to be stored."""

    pass


class StudentResponse(StudentBase):
    """Student response schema."""

    id: int
    created_at: datetime
    updated_at: datetime


class StudentSearch(BaseSchema):
    """Search criteria. Every supplied criterion widens the result set."""

    id: str | None = None
    name: str | None = None
    father_name: str | None = None
    roll_number: str | None = None

    @field_validator("id", "name", "father_name", "roll_number")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        # Values arrive already stripped, so whitespace-only input is ""
        return v or None

    @property
    def has_criteria(self) -> bool:
        return any(
            value is not None
            for value in (self.id, self.name, self.father_name, self.roll_number)
        )
