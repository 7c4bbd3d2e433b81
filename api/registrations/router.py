"""
Registration endpoint.

A single path serves every operation; the operation is picked from the HTTP
method and the `action` / `id` query parameters:

- POST                         -> create
- GET    ?action=list          -> list
- GET    ?action=view&id=N     -> get by id
- DELETE ?id=N                 -> delete
- GET    (anything else)       -> health check
- OPTIONS                      -> bare 200

The path itself comes from settings and is applied as the router prefix
(see `api/main.py`).
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request, Response

from core.config import Settings

from . import errors, service, validation
from .repository import StoreFactory
from .responses import envelope

router = APIRouter()


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store_factory(request: Request) -> StoreFactory:
    return request.app.state.store_factory


@router.post("", status_code=201)
async def create_registration(
    request: Request,
    store_factory: StoreFactory = Depends(get_store_factory),
) -> dict:
    student = service.prepare_registration(await request.body())
    async with store_factory() as store:
        record = await service.register_student(store, student)
    return envelope(success=True, message="Registration Successful", data=record)


@router.get("")
async def read_registrations(
    action: str | None = Query(default=None),
    student_id: str | None = Query(default=None, alias="id"),
    settings: Settings = Depends(get_settings),
    store_factory: StoreFactory = Depends(get_store_factory),
) -> dict:
    if action == "list":
        async with store_factory() as store:
            records = await service.list_students(store)
        return envelope(success=True, count=len(records), data=records)

    if action == "view" and student_id is not None:
        parsed_id = validation.parse_student_id(student_id)
        async with store_factory() as store:
            record = await service.get_student(store, parsed_id)
        return envelope(success=True, data=record)

    # Health check: no store access.
    return envelope(success=True, **service.health(settings.api_name))


@router.delete("")
async def delete_registration(
    student_id: str | None = Query(default=None, alias="id"),
    store_factory: StoreFactory = Depends(get_store_factory),
) -> dict:
    if student_id is None:
        raise errors.MethodNotAllowed()

    parsed_id = validation.parse_student_id(student_id)
    async with store_factory() as store:
        await service.delete_student(store, parsed_id)
    return envelope(success=True, message="Student removed successfully")


@router.options("")
async def registration_options() -> Response:
    return Response(status_code=200)
