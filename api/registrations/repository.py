"""
Registration persistence (raw SQL).

The service talks to a `StudentStore`. `PostgresStudentStore` is the asyncpg
implementation bound to one borrowed connection; tests can swap in any object
with the same coroutine methods.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import Any, AsyncIterator, Callable, Protocol

import asyncpg

from core import db

from . import errors, schemas

logger = logging.getLogger(__name__)

STUDENT_COLUMNS = 'id, "studentName", email, course, "registrationDate"'

# command_timeout surfaces as asyncio.TimeoutError, which is not an OSError before 3.11.
STORE_ERRORS = (OSError, asyncio.TimeoutError, asyncpg.PostgresError, asyncpg.InterfaceError)


class StudentStore(Protocol):
    async def create(self, student: schemas.StudentCreate) -> dict[str, Any]: ...

    async def list_all(self) -> list[dict[str, Any]]: ...

    async def get_by_id(self, student_id: int) -> dict[str, Any] | None: ...

    async def get_by_email(self, email: str) -> dict[str, Any] | None: ...

    async def delete(self, student_id: int) -> bool: ...


StoreFactory = Callable[[], AbstractAsyncContextManager[StudentStore]]


class PostgresStudentStore:
    def __init__(self, conn: asyncpg.Connection) -> None:
        self._conn = conn

    async def create(self, student: schemas.StudentCreate) -> dict[str, Any]:
        try:
            row = await self._conn.fetchrow(
                f"""
                INSERT INTO students ("studentName", email, course, "registrationDate")
                VALUES ($1, $2, $3, now())
                RETURNING {STUDENT_COLUMNS}
                """,
                student.studentName,
                student.email,
                student.course,
            )
        except asyncpg.UniqueViolationError as exc:
            # Lost the race against a concurrent insert of the same email.
            raise errors.Conflict() from exc
        except STORE_ERRORS as exc:
            logger.exception("student_insert_failed email=%s", student.email)
            raise errors.StoreFailure("Failed to register student") from exc

        if row is None:
            raise errors.StoreFailure("Failed to register student")
        return db.record_to_dict(row)

    async def list_all(self) -> list[dict[str, Any]]:
        try:
            rows = await self._conn.fetch(
                f"""
                SELECT {STUDENT_COLUMNS}
                FROM students
                ORDER BY "registrationDate" DESC, id DESC
                """
            )
        except STORE_ERRORS as exc:
            logger.exception("student_list_failed")
            raise errors.StoreFailure("Failed to fetch students") from exc
        return [db.record_to_dict(r) for r in rows]

    async def get_by_id(self, student_id: int) -> dict[str, Any] | None:
        try:
            row = await self._conn.fetchrow(
                f"""
                SELECT {STUDENT_COLUMNS}
                FROM students
                WHERE id = $1
                """,
                student_id,
            )
        except STORE_ERRORS as exc:
            logger.exception("student_fetch_failed student_id=%s", student_id)
            raise errors.StoreFailure("Failed to fetch student") from exc
        return db.record_to_dict(row) if row is not None else None

    async def get_by_email(self, email: str) -> dict[str, Any] | None:
        try:
            row = await self._conn.fetchrow(
                f"""
                SELECT {STUDENT_COLUMNS}
                FROM students
                WHERE email = $1
                LIMIT 1
                """,
                email,
            )
        except STORE_ERRORS as exc:
            logger.exception("student_email_lookup_failed email=%s", email)
            raise errors.StoreFailure("Failed to check email address") from exc
        return db.record_to_dict(row) if row is not None else None

    async def delete(self, student_id: int) -> bool:
        try:
            row = await self._conn.fetchrow(
                """
                DELETE FROM students
                WHERE id = $1
                RETURNING id
                """,
                student_id,
            )
        except STORE_ERRORS:
            # A failed delete reports the same way as a missing row.
            logger.exception("student_delete_failed student_id=%s", student_id)
            return False
        return row is not None


@asynccontextmanager
async def postgres_store() -> AsyncIterator[StudentStore]:
    """
    Default store factory: one pooled connection per request.
    """
    try:
        async with db.connection() as conn:
            yield PostgresStudentStore(conn)
    except db.DatabaseUnavailableError as exc:
        logger.error("db_connection_failed error=%s", exc)
        raise errors.StoreFailure("Database connection failed") from exc
