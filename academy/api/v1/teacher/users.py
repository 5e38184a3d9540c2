import uuid

from fastapi import APIRouter, Body, Depends, Query, status

from academy.core.deps import AuthorizationService, filter_params
from academy.core.enum import AUTHOR_ROLES, GRADER_ROLES, Role
from academy.libs.filters import FilterState
from academy.schemas.auth.user import TeacherCreateAccount
from academy.services.shares.auth import AuthService
from academy.services.teacher.progress import StudentProgressService
from academy.services.teacher.submissions import TeacherSubmissionService

router = APIRouter(prefix="/teacher", tags=["Teacher Students"])


@router.get("/users")
async def list_students(
    filters: FilterState = Depends(filter_params),
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=100),
    authorization: AuthorizationService = Depends(AuthorizationService),
    progress_service: StudentProgressService = Depends(StudentProgressService),
):
    await authorization.require_role(GRADER_ROLES)
    return await progress_service.list_students_async(filters, page, size)


@router.get("/users/{user_id}/progress")
async def get_student_progress(
    user_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    progress_service: StudentProgressService = Depends(StudentProgressService),
):
    viewer = await authorization.require_role(GRADER_ROLES)
    return await progress_service.get_user_progress_async(user_id, viewer)


@router.post("/create-account", status_code=status.HTTP_201_CREATED)
async def create_student_account(
    schema: TeacherCreateAccount = Body(...),
    authorization: AuthorizationService = Depends(AuthorizationService),
    auth_service: AuthService = Depends(AuthService),
):
    teacher = await authorization.require_role([Role.TEACHER])
    return await auth_service.create_account_for_student_async(schema, teacher)


@router.get("/students/{student_id}/homework")
async def list_student_homework(
    student_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    submission_service: TeacherSubmissionService = Depends(TeacherSubmissionService),
):
    user = await authorization.require_role(AUTHOR_ROLES)
    return await submission_service.list_student_homework_async(student_id, user)


@router.get("/students/{student_id}/activities")
async def list_student_activities(
    student_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    submission_service: TeacherSubmissionService = Depends(TeacherSubmissionService),
):
    user = await authorization.require_role(AUTHOR_ROLES)
    return await submission_service.list_student_activity_submissions_async(student_id, user)
