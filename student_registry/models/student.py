"""Student model."""

from sqlalchemy import Float, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from student_registry.core.database import Base
from student_registry.models.base import IDMixin, TimestampMixin

# Lookup columns; none of them is unique, duplicate roll numbers are allowed
INDEXED_FIELDS = ("name", "father_name", "email", "roll_number")


class Student(Base, IDMixin, TimestampMixin):
    """A registered student."""

    __tablename__ = "students"

    roll_number: Mapped[str] = mapped_column(Text, nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    father_name: Mapped[str] = mapped_column(Text, nullable=False)
    address: Mapped[str] = mapped_column(Text, nullable=False)
    age: Mapped[int] = mapped_column(Integer, nullable=False)
    phone: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[str] = mapped_column(Text, nullable=False)

    father_phone: Mapped[str | None] = mapped_column(Text, nullable=True)
    father_email: Mapped[str | None] = mapped_column(Text, nullable=True)
    eamcet_rank: Mapped[int | None] = mapped_column(Integer, nullable=True)
    ssc_marks: Mapped[float | None] = mapped_column(Float, nullable=True)
    inter_marks: Mapped[float | None] = mapped_column(Float, nullable=True)
    achievements: Mapped[str | None] = mapped_column(Text, nullable=True)
    remarks: Mapped[str | None] = mapped_column(Text, nullable=True)
    identification_mark: Mapped[str | None] = mapped_column(Text, nullable=True)
    blood_group: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        *(Index(f"ix_students_{field}", field) for field in INDEXED_FIELDS),
        # Never hand out a deleted row's id again on SQLite
        {"sqlite_autoincrement": True},
    )

    def __repr__(self) -> str:
        return f"<Student(id={self.id}, roll_number={self.roll_number}, name={self.name})>"
