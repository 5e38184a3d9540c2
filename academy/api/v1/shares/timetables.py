import uuid

from fastapi import APIRouter, Body, Depends, Query, status

from academy.core.deps import AuthorizationService
from academy.core.enum import Role
from academy.schemas.shares.timetable import CreateTimetable, UpdateTimetable
from academy.services.shares.timetables import TimetableService

router = APIRouter(prefix="/timetables", tags=["Timetables"])


@router.get("")
async def list_timetables(
    course_id: uuid.UUID | None = Query(None),
    authorization: AuthorizationService = Depends(AuthorizationService),
    timetable_service: TimetableService = Depends(TimetableService),
):
    user = await authorization.get_current_user()
    return await timetable_service.list_timetables_async(user, course_id)


@router.get("/course/{course_id}")
async def list_course_timetables(
    course_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    timetable_service: TimetableService = Depends(TimetableService),
):
    user = await authorization.get_current_user()
    return await timetable_service.list_course_timetables_async(course_id, user)


@router.get("/{timetable_id}")
async def get_timetable(
    timetable_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    timetable_service: TimetableService = Depends(TimetableService),
):
    user = await authorization.get_current_user()
    return await timetable_service.get_timetable_async(timetable_id, user)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_timetable(
    schema: CreateTimetable = Body(...),
    authorization: AuthorizationService = Depends(AuthorizationService),
    timetable_service: TimetableService = Depends(TimetableService),
):
    admin = await authorization.require_role([Role.ADMIN])
    return await timetable_service.create_timetable_async(schema, admin)


@router.patch("/{timetable_id}")
async def update_timetable(
    timetable_id: uuid.UUID,
    schema: UpdateTimetable = Body(...),
    authorization: AuthorizationService = Depends(AuthorizationService),
    timetable_service: TimetableService = Depends(TimetableService),
):
    await authorization.require_role([Role.ADMIN])
    return await timetable_service.update_timetable_async(timetable_id, schema)


@router.delete("/{timetable_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_timetable(
    timetable_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    timetable_service: TimetableService = Depends(TimetableService),
):
    await authorization.require_role([Role.ADMIN])
    await timetable_service.delete_timetable_async(timetable_id)
