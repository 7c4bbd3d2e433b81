"""
Request parsing, validation and sanitization for registrations.

Validation rules are evaluated independently so a single response can report
every failing field. Sanitization runs only after validation passes.
"""

from __future__ import annotations

import json
import re
from typing import Any

from email_validator import EmailNotValidError, validate_email

from . import errors, schemas

STUDENT_NAME_REQUIRED = "Student name is required"
EMAIL_REQUIRED = "Email address is required"
EMAIL_INVALID = "Invalid email address format"
COURSE_REQUIRED = "Course selection is required"

# Postgres BIGINT bounds; ids outside them cannot name a row.
MIN_STUDENT_ID = -(2**63)
MAX_STUDENT_ID = 2**63 - 1

_BARE_AMPERSAND = re.compile(r"&(?!#[0-9]+;|#[xX][0-9a-fA-F]+;|[A-Za-z][A-Za-z0-9]*;)")
_HTML_ESCAPES = (("<", "&lt;"), (">", "&gt;"), ('"', "&quot;"), ("'", "&#x27;"))


def parse_payload(raw: bytes | str) -> dict[str, Any]:
    try:
        data = json.loads(raw)
    except (ValueError, RecursionError) as exc:
        raise errors.MalformedInput("Invalid JSON data") from exc

    if not isinstance(data, dict):
        raise errors.MalformedInput("Invalid JSON data")
    return data


def _field_text(data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    # bool is an int subclass; a flag is not a name.
    if isinstance(value, bool):
        return ""
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return value
    return ""


def is_valid_email(value: str) -> bool:
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def validate_student_data(data: dict[str, Any]) -> list[str]:
    problems: list[str] = []

    if not _field_text(data, "studentName").strip():
        problems.append(STUDENT_NAME_REQUIRED)

    email = _field_text(data, "email").strip()
    if not email:
        problems.append(EMAIL_REQUIRED)
    elif not is_valid_email(email):
        problems.append(EMAIL_INVALID)

    if not _field_text(data, "course").strip():
        problems.append(COURSE_REQUIRED)

    return problems


def escape_html(value: str) -> str:
    """
    HTML-escape special characters.

    An `&` that already starts a well-formed entity reference (`&amp;`,
    `&#39;`, `&#x27;`) is left alone so escaping twice changes nothing.
    """
    value = _BARE_AMPERSAND.sub("&amp;", value)
    for char, entity in _HTML_ESCAPES:
        value = value.replace(char, entity)
    return value


def sanitize_student_data(data: dict[str, Any]) -> schemas.StudentCreate:
    return schemas.StudentCreate(
        studentName=escape_html(_field_text(data, "studentName")).strip(),
        email=_field_text(data, "email").strip().lower(),
        course=escape_html(_field_text(data, "course")).strip(),
    )


def clean_registration(raw: bytes | str) -> schemas.StudentCreate:
    """
    Parse, validate and sanitize a create-registration request body.
    """
    data = parse_payload(raw)
    problems = validate_student_data(data)
    if problems:
        raise errors.ValidationFailed("Missing or Invalid Data", errors=problems)
    return sanitize_student_data(data)


def parse_student_id(raw: str | None) -> int:
    """
    Parse the `id` query parameter.

    Non-integers are malformed input. Integers outside the BIGINT column range
    cannot match any row, so they are reported as not found without a lookup.
    """
    value = (raw or "").strip()
    try:
        student_id = int(value, 10)
    except ValueError as exc:
        raise errors.MalformedInput("Invalid student id") from exc

    if not MIN_STUDENT_ID <= student_id <= MAX_STUDENT_ID:
        raise errors.NotFound()
    return student_id
