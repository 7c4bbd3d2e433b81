"""
Registration schemas.

Field names follow the `students` table columns and the JSON wire format
(camelCase), so rows map onto models without renaming.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class StudentCreate(BaseModel):
    """
    Validated and sanitized registration payload, ready to insert.
    """

    studentName: str
    email: str
    course: str


class StudentRecord(StudentCreate):
    id: int
    registrationDate: datetime | None = None
