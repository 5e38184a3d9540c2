import uuid

from fastapi import APIRouter, Body, Depends, status

from academy.core.deps import AuthorizationService
from academy.core.enum import AUTHOR_ROLES
from academy.schemas.teacher.chapter import CreateAttachment, CreateChapter, UpdateChapter
from academy.schemas.teacher.course import PublishSchema
from academy.services.teacher.chapter import TeacherChapterService

router = APIRouter(prefix="/courses/{course_id}/chapters", tags=["Teacher Chapters"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_chapter(
    course_id: uuid.UUID,
    schema: CreateChapter = Body(...),
    authorization: AuthorizationService = Depends(AuthorizationService),
    chapter_service: TeacherChapterService = Depends(TeacherChapterService),
):
    user = await authorization.require_role(AUTHOR_ROLES)
    return await chapter_service.create_chapter_async(course_id, schema, user)


@router.patch("/{chapter_id}")
async def update_chapter(
    course_id: uuid.UUID,
    chapter_id: uuid.UUID,
    schema: UpdateChapter = Body(...),
    authorization: AuthorizationService = Depends(AuthorizationService),
    chapter_service: TeacherChapterService = Depends(TeacherChapterService),
):
    user = await authorization.require_role(AUTHOR_ROLES)
    return await chapter_service.update_chapter_async(course_id, chapter_id, schema, user)


@router.delete("/{chapter_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_chapter(
    course_id: uuid.UUID,
    chapter_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    chapter_service: TeacherChapterService = Depends(TeacherChapterService),
):
    user = await authorization.require_role(AUTHOR_ROLES)
    await chapter_service.delete_chapter_async(course_id, chapter_id, user)


@router.patch("/{chapter_id}/publish")
async def publish_chapter(
    course_id: uuid.UUID,
    chapter_id: uuid.UUID,
    schema: PublishSchema = Body(...),
    authorization: AuthorizationService = Depends(AuthorizationService),
    chapter_service: TeacherChapterService = Depends(TeacherChapterService),
):
    user = await authorization.require_role(AUTHOR_ROLES)
    return await chapter_service.publish_chapter_async(course_id, chapter_id, schema, user)


@router.post("/{chapter_id}/attachments", status_code=status.HTTP_201_CREATED)
async def add_attachment(
    course_id: uuid.UUID,
    chapter_id: uuid.UUID,
    schema: CreateAttachment = Body(...),
    authorization: AuthorizationService = Depends(AuthorizationService),
    chapter_service: TeacherChapterService = Depends(TeacherChapterService),
):
    user = await authorization.require_role(AUTHOR_ROLES)
    return await chapter_service.add_attachment_async(course_id, chapter_id, schema, user)


@router.delete("/{chapter_id}/attachments/{attachment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_attachment(
    course_id: uuid.UUID,
    chapter_id: uuid.UUID,
    attachment_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    chapter_service: TeacherChapterService = Depends(TeacherChapterService),
):
    user = await authorization.require_role(AUTHOR_ROLES)
    await chapter_service.delete_attachment_async(course_id, chapter_id, attachment_id, user)
