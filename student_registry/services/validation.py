"""Registration form validation.

Pure functions, no database access. ``validate_submission`` turns the raw
key/value pairs of a form or JSON body into a ``StudentCreate`` or raises
the first problem it finds.
"""

import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from student_registry.core.exceptions import InvalidNumberError, MissingFieldError
from student_registry.schemas.student import StudentCreate

# Checked in this order; the first empty one is reported
REQUIRED_FIELDS = (
    "roll_number",
    "name",
    "father_name",
    "address",
    "age",
    "phone",
    "email",
)

OPTIONAL_FIELDS = (
    "father_phone",
    "father_email",
    "eamcet_rank",
    "ssc_marks",
    "inter_marks",
    "achievements",
    "remarks",
    "identification_mark",
    "blood_group",
)

INTEGER_FIELDS = ("age", "eamcet_rank")
FLOAT_FIELDS = ("ssc_marks", "inter_marks")

# Range of the INTEGER columns the whole numbers are stored in
INT_MIN = -(2**31)
INT_MAX = 2**31 - 1


@dataclass(frozen=True)
class Coercion:
    """Outcome of converting submitted text to a number."""

    field: str
    raw: Any
    value: int | float | None = None
    ok: bool = True


def clean_value(value: Any) -> str | None:
    """Strip submitted text; empty and missing values become None."""
    if value is None:
        return None
    text = value.strip() if isinstance(value, str) else str(value).strip()
    return text or None


def coerce_number(field: str, raw: Any, integer: bool = False) -> Coercion:
    """Convert ``raw`` to an int (``integer=True``) or a float.

    Never raises; a failed conversion comes back with ``ok=False``. Whole
    numbers outside the 32-bit column range fail too.
    """
    failed = Coercion(field=field, raw=raw, ok=False)
    if raw is None or isinstance(raw, bool):
        return failed

    text = str(raw).strip()
    try:
        number: int | float = int(text)
    except ValueError:
        try:
            number = float(text)
        except ValueError:
            return failed
        if not math.isfinite(number):
            return failed
        if integer:
            if not number.is_integer():
                return failed
            number = int(number)

    if integer and not INT_MIN <= number <= INT_MAX:
        return failed
    if not integer:
        number = float(number)
    return Coercion(field=field, raw=raw, value=number)


def validate_submission(form: Mapping[str, Any]) -> StudentCreate:
    """Validate a registration submission.

    Raises:
        MissingFieldError: a required field is missing or blank.
        InvalidNumberError: a numeric field does not hold a number.
    """
    cleaned: dict[str, Any] = {
        field: clean_value(form.get(field))
        for field in REQUIRED_FIELDS + OPTIONAL_FIELDS
    }

    for field in REQUIRED_FIELDS:
        if cleaned[field] is None:
            raise MissingFieldError(field)

    for field in INTEGER_FIELDS + FLOAT_FIELDS:
        if cleaned[field] is None:
            continue
        result = coerce_number(field, cleaned[field], integer=field in INTEGER_FIELDS)
        if not result.ok:
            raise InvalidNumberError(field, result.raw)
        cleaned[field] = result.value

    return StudentCreate(**cleaned)
