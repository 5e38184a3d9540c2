import uuid

from fastapi import APIRouter, Body, Depends, status

from academy.core.deps import AuthorizationService
from academy.core.enum import AUTHOR_ROLES
from academy.schemas.teacher.course import CreateCourse, PublishSchema, ReorderSchema, UpdateCourse
from academy.services.teacher.course import TeacherCourseService

router = APIRouter(prefix="/courses", tags=["Teacher Courses"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_course(
    schema: CreateCourse = Body(...),
    authorization: AuthorizationService = Depends(AuthorizationService),
    course_service: TeacherCourseService = Depends(TeacherCourseService),
):
    user = await authorization.require_role(AUTHOR_ROLES)
    return await course_service.create_course_async(schema, user)


@router.patch("/{course_id}")
async def update_course(
    course_id: uuid.UUID,
    schema: UpdateCourse = Body(...),
    authorization: AuthorizationService = Depends(AuthorizationService),
    course_service: TeacherCourseService = Depends(TeacherCourseService),
):
    user = await authorization.require_role(AUTHOR_ROLES)
    return await course_service.update_course_async(course_id, schema, user)


@router.delete("/{course_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_course(
    course_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    course_service: TeacherCourseService = Depends(TeacherCourseService),
):
    user = await authorization.require_role(AUTHOR_ROLES)
    await course_service.delete_course_async(course_id, user)


@router.patch("/{course_id}/publish")
async def publish_course(
    course_id: uuid.UUID,
    schema: PublishSchema = Body(...),
    authorization: AuthorizationService = Depends(AuthorizationService),
    course_service: TeacherCourseService = Depends(TeacherCourseService),
):
    user = await authorization.require_role(AUTHOR_ROLES)
    return await course_service.publish_course_async(course_id, schema, user)


@router.put("/{course_id}/reorder")
async def reorder_content(
    course_id: uuid.UUID,
    schema: ReorderSchema = Body(...),
    authorization: AuthorizationService = Depends(AuthorizationService),
    course_service: TeacherCourseService = Depends(TeacherCourseService),
):
    user = await authorization.require_role(AUTHOR_ROLES)
    return await course_service.reorder_content_async(course_id, schema, user)
