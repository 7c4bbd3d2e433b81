# tests/conftest.py
"""
Pytest configuration and fixtures.
Adds api/ to sys.path so `import core` / `import registrations` work like they
do when the app runs from that directory.
"""

import sys
from contextlib import asynccontextmanager
from datetime import datetime, timedelta
from pathlib import Path

import pytest

project_root = Path(__file__).parent.parent
api_root = project_root / "api"
if str(api_root) not in sys.path:
    sys.path.insert(0, str(api_root))

from fastapi.testclient import TestClient  # noqa: E402

from core.config import Settings  # noqa: E402
from registrations import errors  # noqa: E402


class MemoryStudentStore:
    """
    In-process stand-in for the `students` table.

    Enforces the unique email constraint and hands out strictly increasing
    registration timestamps.
    """

    def __init__(self) -> None:
        self.rows: dict[int, dict] = {}
        self._next_id = 1
        self._clock = datetime(2026, 1, 1, 9, 0, 0)

    async def create(self, student):
        if any(row["email"] == student.email for row in self.rows.values()):
            raise errors.Conflict()
        self._clock += timedelta(seconds=1)
        row = {
            "id": self._next_id,
            "studentName": student.studentName,
            "email": student.email,
            "course": student.course,
            "registrationDate": self._clock,
        }
        self.rows[self._next_id] = row
        self._next_id += 1
        return dict(row)

    async def list_all(self):
        ordered = sorted(
            self.rows.values(),
            key=lambda r: (r["registrationDate"], r["id"]),
            reverse=True,
        )
        return [dict(r) for r in ordered]

    async def get_by_id(self, student_id):
        row = self.rows.get(student_id)
        return dict(row) if row is not None else None

    async def get_by_email(self, email):
        for row in self.rows.values():
            if row["email"] == email:
                return dict(row)
        return None

    async def delete(self, student_id):
        return self.rows.pop(student_id, None) is not None


class MemoryStoreFactory:
    """
    Store factory that records how many stores were opened and closed.
    """

    def __init__(self, store: MemoryStudentStore) -> None:
        self.store = store
        self.opened = 0
        self.closed = 0

    @asynccontextmanager
    async def __call__(self):
        self.opened += 1
        try:
            yield self.store
        finally:
            self.closed += 1


@pytest.fixture
def memory_store():
    return MemoryStudentStore()


@pytest.fixture
def store_factory(memory_store):
    return MemoryStoreFactory(memory_store)


@pytest.fixture
def settings():
    return Settings(registration_path="/register.php", api_name="Test Registration API")


@pytest.fixture
def client(settings, store_factory):
    from main import create_app

    app = create_app(settings, store_factory=store_factory)
    with TestClient(app) as test_client:
        yield test_client
