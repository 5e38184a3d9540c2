import uuid

from fastapi import APIRouter, Body, Depends, Query, status

from academy.core.deps import AuthorizationService
from academy.core.enum import AUTHOR_ROLES
from academy.schemas.teacher.course import PublishSchema
from academy.schemas.teacher.livestream import CreateLiveStream, UpdateLiveStream
from academy.services.teacher.livestream import TeacherLiveStreamService

router = APIRouter(prefix="/teacher/livestreams", tags=["Teacher Live Streams"])


@router.get("")
async def list_streams(
    course_id: uuid.UUID | None = Query(None),
    authorization: AuthorizationService = Depends(AuthorizationService),
    stream_service: TeacherLiveStreamService = Depends(TeacherLiveStreamService),
):
    user = await authorization.require_role(AUTHOR_ROLES)
    return await stream_service.list_streams_async(user, course_id)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_stream(
    schema: CreateLiveStream = Body(...),
    authorization: AuthorizationService = Depends(AuthorizationService),
    stream_service: TeacherLiveStreamService = Depends(TeacherLiveStreamService),
):
    user = await authorization.require_role(AUTHOR_ROLES)
    return await stream_service.create_stream_async(schema, user)


@router.patch("/{stream_id}")
async def update_stream(
    stream_id: uuid.UUID,
    schema: UpdateLiveStream = Body(...),
    authorization: AuthorizationService = Depends(AuthorizationService),
    stream_service: TeacherLiveStreamService = Depends(TeacherLiveStreamService),
):
    user = await authorization.require_role(AUTHOR_ROLES)
    return await stream_service.update_stream_async(stream_id, schema, user)


@router.delete("/{stream_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_stream(
    stream_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    stream_service: TeacherLiveStreamService = Depends(TeacherLiveStreamService),
):
    user = await authorization.require_role(AUTHOR_ROLES)
    await stream_service.delete_stream_async(stream_id, user)


@router.patch("/{stream_id}/publish")
async def publish_stream(
    stream_id: uuid.UUID,
    schema: PublishSchema = Body(...),
    authorization: AuthorizationService = Depends(AuthorizationService),
    stream_service: TeacherLiveStreamService = Depends(TeacherLiveStreamService),
):
    user = await authorization.require_role(AUTHOR_ROLES)
    return await stream_service.publish_stream_async(stream_id, schema, user)
