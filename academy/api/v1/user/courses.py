import uuid

from fastapi import APIRouter, Depends

from academy.core.deps import AuthorizationService, filter_params
from academy.libs.filters import FilterState
from academy.services.user.courses import CourseService

router = APIRouter(prefix="/courses", tags=["User Courses"])


@router.get("")
async def list_courses(
    filters: FilterState = Depends(filter_params),
    course_service: CourseService = Depends(CourseService),
):
    return await course_service.list_courses_async(filters)


@router.get("/{course_id}")
async def get_course(
    course_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    course_service: CourseService = Depends(CourseService),
):
    user = await authorization.get_current_user_if_any()
    return await course_service.get_course_async(course_id, user)


@router.get("/{course_id}/content")
async def get_course_content(
    course_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    course_service: CourseService = Depends(CourseService),
):
    user = await authorization.get_current_user_if_any()
    return await course_service.get_content_async(course_id, user)


@router.get("/{course_id}/access")
async def get_course_access(
    course_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    course_service: CourseService = Depends(CourseService),
):
    user = await authorization.get_current_user()
    return await course_service.get_access_async(course_id, user)


@router.get("/{course_id}/progress")
async def get_course_progress(
    course_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    course_service: CourseService = Depends(CourseService),
):
    user = await authorization.get_current_user()
    return await course_service.get_progress_async(course_id, user)


@router.post("/{course_id}/purchase")
async def purchase_course(
    course_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    course_service: CourseService = Depends(CourseService),
):
    user = await authorization.get_current_user()
    return await course_service.purchase_async(course_id, user)
