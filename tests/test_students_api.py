"""Tests for the /api/students endpoints and the application shell."""

import asyncio
import re

import pytest
from fastapi.exceptions import RequestValidationError
from sqlalchemy import func, select
from starlette.requests import Request

from student_registry.main import app
from student_registry.models.student import Student
from student_registry.services.validation import REQUIRED_FIELDS

URL = "/api/students"


def student_count(db):
    return db.execute(select(func.count()).select_from(Student)).scalar()


def saved_id(response):
    match = re.search(r"Student saved \(ID: (\d+)\)", response.text)
    assert match, response.text
    return int(match.group(1))


def test_create_student_from_form(client, db, registration):
    response = client.post(URL, data=registration)

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    student = db.get(Student, saved_id(response))
    assert student.name == "Anil Sharma"
    assert student.age == 18
    assert student.ssc_marks == 9.5
    assert student.inter_marks is None
    assert student.created_at is not None
    assert student_count(db) == 1


def test_create_student_from_json(client, db, registration):
    registration.update(age=19, eamcet_rank=None)
    response = client.post(URL, json=registration)

    assert response.status_code == 200
    student = db.get(Student, saved_id(response))
    assert student.age == 19
    assert student.eamcet_rank is None


def test_create_student_from_multipart(client, db, registration):
    files = {key: (None, value) for key, value in registration.items()}
    response = client.post(URL, files=files)

    assert response.status_code == 200
    assert db.get(Student, saved_id(response)).roll_number == "21CS045"


def test_each_create_gets_a_new_id(client, db, registration):
    ids = [saved_id(client.post(URL, data=registration)) for _ in range(3)]

    assert len(set(ids)) == 3
    # Duplicate roll numbers and emails are allowed
    assert student_count(db) == 3


@pytest.mark.parametrize("field", REQUIRED_FIELDS)
def test_missing_field_is_rejected(client, db, registration, field):
    registration[field] = ""
    response = client.post(URL, data=registration)

    assert response.status_code == 400
    assert f"Missing required field: {field}" in response.text
    assert "All fields marked with * are required." in response.text
    assert student_count(db) == 0


def test_invalid_number_is_rejected(client, db, registration):
    registration["ssc_marks"] = "not-a-number"
    response = client.post(URL, data=registration)

    assert response.status_code == 400
    assert "Invalid numeric value for field: ssc_marks" in response.text
    assert student_count(db) == 0


@pytest.mark.parametrize("body", ["{not json", "[1, 2]"])
def test_bad_json_body_is_rejected(client, db, body):
    response = client.post(
        URL,
        content=body,
        headers={"content-type": "application/json"},
    )

    assert response.status_code == 400
    assert student_count(db) == 0


def test_long_values_are_stored_whole(client, db, registration):
    registration.update(name="A" * 300, blood_group="O positive (Rh+)")
    response = client.post(URL, data=registration)

    assert response.status_code == 200
    student = db.get(Student, saved_id(response))
    assert student.name == "A" * 300
    assert student.blood_group == "O positive (Rh+)"


def test_out_of_range_age_is_rejected(client, db, registration):
    registration["age"] = "99999999999999999999"
    response = client.post(URL, data=registration)

    assert response.status_code == 400
    assert "Invalid numeric value for field: age" in response.text
    assert student_count(db) == 0


def test_json_body_that_is_not_utf8_is_rejected(client, db):
    response = client.post(
        URL,
        content=b'{"name": "\xff"}',
        headers={"content-type": "application/json"},
    )

    assert response.status_code == 400
    assert response.headers["content-type"].startswith("text/html")
    assert "Malformed JSON body" in response.text
    assert student_count(db) == 0


def test_multipart_without_boundary_renders_error_page(client, db):
    response = client.post(
        URL,
        content=b"garbage",
        headers={"content-type": "multipart/form-data"},
    )

    assert response.status_code == 400
    assert response.headers["content-type"].startswith("text/html")
    assert "Missing boundary" in response.text
    assert 'href="/register.html"' in response.text
    assert student_count(db) == 0


def test_unknown_page_renders_error_page(client):
    response = client.get("/no-such-page.html")

    assert response.status_code == 404
    assert response.headers["content-type"].startswith("text/html")
    assert "Not Found" in response.text


def test_request_validation_error_renders_error_page():
    handler = app.exception_handlers[RequestValidationError]
    request = Request(
        {
            "type": "http",
            "method": "GET",
            "path": URL,
            "headers": [],
            "query_string": b"",
        }
    )
    exc = RequestValidationError(
        [{"loc": ("query", "id"), "msg": "bad value", "type": "value_error"}]
    )

    response = asyncio.run(handler(request, exc))

    assert response.status_code == 400
    assert response.headers["content-type"].startswith("text/html")
    body = response.body.decode()
    assert "Request validation failed" in body
    assert "query.id: bad value" in body
    assert 'href="/search.html"' in body


def test_storage_failure_on_create(broken_client, registration):
    response = broken_client.post(URL, data=registration)

    assert response.status_code == 500
    assert "Error saving student" in response.text
    assert "no such table" in response.text
    assert "Traceback" not in response.text


def test_search_lists_newest_first(client, registration):
    for roll in ("R1", "R2", "R3"):
        registration["roll_number"] = roll
        client.post(URL, data=registration)

    response = client.get(URL)

    assert response.status_code == 200
    assert "Found 3 student(s)" in response.text
    positions = [response.text.index(f"<span>{roll}</span>") for roll in ("R3", "R2", "R1")]
    assert positions == sorted(positions)


def test_search_combines_criteria_with_or(client, registration):
    people = [
        ("R1", "Ravi Teja", "Suresh"),
        ("R2", "Kiran", "Vijay Kumar"),
        ("R3", "Mohan", "Rao"),
    ]
    for roll, name, father in people:
        registration.update(roll_number=roll, name=name, father_name=father)
        client.post(URL, data=registration)

    response = client.get(URL, params={"name": "Ravi", "father_name": "Kumar"})

    assert "Found 2 student(s)" in response.text
    assert "<span>Mohan</span>" not in response.text


def test_search_by_id(client, registration):
    for roll in ("45", "1452", "99"):
        registration["roll_number"] = roll
        client.post(URL, data=registration)

    response = client.get(URL, params={"id": "45"})

    assert "Found 2 student(s)" in response.text
    assert "<span>99</span>" not in response.text


def test_search_without_matches(client, registration):
    client.post(URL, data=registration)

    response = client.get(URL, params={"name": "Zubair"})

    assert response.status_code == 200
    assert "No student records found" in response.text


def test_search_escapes_stored_markup(client, registration):
    registration["name"] = "<script>alert(1)</script>"
    client.post(URL, data=registration)

    response = client.get(URL)

    assert "<script>alert(1)</script>" not in response.text
    assert "&lt;script&gt;alert(1)&lt;/script&gt;" in response.text


def test_storage_failure_on_search(broken_client):
    response = broken_client.get(URL, params={"name": "Anil"})

    assert response.status_code == 500
    assert "Search Error" in response.text
    assert 'href="/search.html"' in response.text


def test_request_id_header(client):
    response = client.get(URL)

    assert response.headers["X-Request-ID"]


def test_root_redirects_to_registration(client):
    response = client.get("/", follow_redirects=False)

    assert response.status_code == 307
    assert response.headers["location"] == "/register.html"


def test_static_pages_are_served(client):
    register = client.get("/register.html")
    search = client.get("/search.html")

    assert register.status_code == 200
    assert 'action="/api/students"' in register.text
    assert search.status_code == 200
    assert 'name="id"' in search.text


def test_health_check(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
