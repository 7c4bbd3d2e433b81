"""
Registration business logic.

Every operation takes the `StudentStore` for the current request and either
returns its result or raises a `RegistrationError` kind.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from . import errors, schemas, validation
from .repository import StudentStore

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def _to_record(row: dict[str, Any]) -> schemas.StudentRecord:
    return schemas.StudentRecord(
        id=int(row["id"]),
        studentName=str(row["studentName"]),
        email=str(row["email"]),
        course=str(row["course"]),
        registrationDate=row.get("registrationDate"),
    )


def prepare_registration(raw_body: bytes | str) -> schemas.StudentCreate:
    """
    Parse, validate and sanitize a request body before any store access.
    """
    return validation.clean_registration(raw_body)


async def register_student(store: StudentStore, student: schemas.StudentCreate) -> schemas.StudentRecord:
    existing = await store.get_by_email(student.email)
    if existing is not None:
        logger.info("registration_duplicate email=%s", student.email)
        raise errors.Conflict()

    row = await store.create(student)
    record = _to_record(row)
    logger.info("registration_created student_id=%s email=%s", record.id, record.email)
    return record


async def list_students(store: StudentStore) -> list[schemas.StudentRecord]:
    rows = await store.list_all()
    return [_to_record(row) for row in rows]


async def get_student(store: StudentStore, student_id: int) -> schemas.StudentRecord:
    row = await store.get_by_id(student_id)
    if row is None:
        raise errors.NotFound()
    return _to_record(row)


async def delete_student(store: StudentStore, student_id: int) -> None:
    deleted = await store.delete(student_id)
    if not deleted:
        raise errors.NotFound()
    logger.info("registration_deleted student_id=%s", student_id)


def health(api_name: str, *, now: datetime | None = None) -> dict[str, Any]:
    moment = now or datetime.now()
    return {
        "message": f"{api_name} is running",
        "timestamp": moment.strftime(TIMESTAMP_FORMAT),
    }
