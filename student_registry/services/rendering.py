"""HTML page rendering.

Every function here is a pure transform from data to markup. Templates are
rendered with autoescaping on, so stored values can never inject markup.
"""

from collections.abc import Sequence
from typing import Any

from jinja2 import Environment, FileSystemLoader, Undefined, select_autoescape

from student_registry.core.config import PACKAGE_DIR

PLACEHOLDER = "N/A"

REGISTER_PAGE = "/register.html"
SEARCH_PAGE = "/search.html"

# (label, attribute) in the order they appear on a result card
RECORD_FIELDS = (
    ("Roll Number", "roll_number"),
    ("Name", "name"),
    ("Father's Name", "father_name"),
    ("Age", "age"),
    ("Phone Number", "phone"),
    ("Email", "email"),
    ("Father's Phone", "father_phone"),
    ("Father's Email", "father_email"),
    ("Address", "address"),
    ("Blood Group", "blood_group"),
    ("SSC Marks", "ssc_marks"),
    ("Inter Marks", "inter_marks"),
    ("EAMCET Rank", "eamcet_rank"),
    ("Achievements", "achievements"),
    ("Remarks", "remarks"),
    ("Identification Mark", "identification_mark"),
)


def display_value(value: Any) -> Any:
    """Value as shown on a page; missing values become the placeholder."""
    if value is None or isinstance(value, Undefined) or value == "":
        return PLACEHOLDER
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


templates = Environment(
    loader=FileSystemLoader(PACKAGE_DIR / "templates"),
    autoescape=select_autoescape(["html"]),
    trim_blocks=True,
    lstrip_blocks=True,
)
templates.filters["display"] = display_value


def render_results(records: Sequence[Any]) -> str:
    """Render the search results page."""
    return templates.get_template("results.html").render(
        records=records,
        fields=RECORD_FIELDS,
        search_page=SEARCH_PAGE,
        register_page=REGISTER_PAGE,
    )


def render_saved(student_id: int) -> str:
    """Render the confirmation page shown after a registration is stored."""
    return templates.get_template("saved.html").render(
        student_id=student_id,
        search_page=SEARCH_PAGE,
        register_page=REGISTER_PAGE,
    )


def render_error(
    title: str,
    message: str,
    detail: str | None = None,
    back_url: str = REGISTER_PAGE,
    back_label: str = "Back",
) -> str:
    """Render a styled error page."""
    return templates.get_template("error.html").render(
        title=title,
        message=message,
        detail=detail,
        back_url=back_url,
        back_label=back_label,
    )
