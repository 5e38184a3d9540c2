import uuid

from fastapi import APIRouter, Body, Depends, status

from academy.core.deps import AuthorizationService
from academy.core.enum import AUTHOR_ROLES, GRADER_ROLES
from academy.schemas.teacher.chapter import CreateActivity, GradeSubmission
from academy.services.teacher.submissions import TeacherSubmissionService

router = APIRouter(prefix="/teacher", tags=["Teacher Submissions"])


# ==============================
# 🧩 ACTIVITIES
# ==============================


@router.post("/chapters/{chapter_id}/activities", status_code=status.HTTP_201_CREATED)
async def create_activity(
    chapter_id: uuid.UUID,
    schema: CreateActivity = Body(...),
    authorization: AuthorizationService = Depends(AuthorizationService),
    submission_service: TeacherSubmissionService = Depends(TeacherSubmissionService),
):
    user = await authorization.require_role(AUTHOR_ROLES)
    return await submission_service.create_activity_async(chapter_id, schema, user)


@router.get("/chapters/{chapter_id}/activities")
async def list_chapter_activities(
    chapter_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    submission_service: TeacherSubmissionService = Depends(TeacherSubmissionService),
):
    user = await authorization.require_role(GRADER_ROLES)
    return await submission_service.list_chapter_activities_async(chapter_id, user)


@router.delete("/activities/{activity_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_activity(
    activity_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    submission_service: TeacherSubmissionService = Depends(TeacherSubmissionService),
):
    user = await authorization.require_role(AUTHOR_ROLES)
    await submission_service.delete_activity_async(activity_id, user)


# ==============================
# 📝 SUBMISSIONS
# ==============================


@router.get("/homework/{chapter_id}")
async def list_homework(
    chapter_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    submission_service: TeacherSubmissionService = Depends(TeacherSubmissionService),
):
    user = await authorization.require_role(AUTHOR_ROLES)
    return await submission_service.list_homework_async(chapter_id, user)


@router.get("/activities/{activity_id}/submissions")
async def list_activity_submissions(
    activity_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    submission_service: TeacherSubmissionService = Depends(TeacherSubmissionService),
):
    user = await authorization.require_role(AUTHOR_ROLES)
    return await submission_service.list_activity_submissions_async(activity_id, user)


@router.patch("/homework/submissions/{submission_id}")
async def grade_homework(
    submission_id: uuid.UUID,
    schema: GradeSubmission = Body(...),
    authorization: AuthorizationService = Depends(AuthorizationService),
    submission_service: TeacherSubmissionService = Depends(TeacherSubmissionService),
):
    user = await authorization.require_role(GRADER_ROLES)
    return await submission_service.grade_homework_async(submission_id, schema, user)


@router.patch("/activities/submissions/{submission_id}")
async def grade_activity(
    submission_id: uuid.UUID,
    schema: GradeSubmission = Body(...),
    authorization: AuthorizationService = Depends(AuthorizationService),
    submission_service: TeacherSubmissionService = Depends(TeacherSubmissionService),
):
    user = await authorization.require_role(GRADER_ROLES)
    return await submission_service.grade_activity_async(submission_id, schema, user)
