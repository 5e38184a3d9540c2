import uuid

from fastapi import APIRouter, Body, Depends, status

from academy.core.deps import AuthorizationService
from academy.schemas.user.learning import SubmitImage
from academy.services.user.learning import LearningService

router = APIRouter(prefix="/courses/{course_id}/chapters", tags=["User Learning"])


@router.get("")
async def list_chapters(
    course_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    learning_service: LearningService = Depends(LearningService),
):
    user = await authorization.get_current_user()
    return await learning_service.list_chapters_async(course_id, user)


@router.get("/{chapter_id}")
async def get_chapter(
    course_id: uuid.UUID,
    chapter_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    learning_service: LearningService = Depends(LearningService),
):
    user = await authorization.get_current_user()
    return await learning_service.get_chapter_async(course_id, chapter_id, user)


# ==============================
# ✅ PROGRESS
# ==============================


@router.get("/{chapter_id}/progress")
async def get_chapter_progress(
    course_id: uuid.UUID,
    chapter_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    learning_service: LearningService = Depends(LearningService),
):
    user = await authorization.get_current_user()
    return await learning_service.get_progress_async(course_id, chapter_id, user)


@router.put("/{chapter_id}/progress")
async def complete_chapter(
    course_id: uuid.UUID,
    chapter_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    learning_service: LearningService = Depends(LearningService),
):
    user = await authorization.get_current_user()
    return await learning_service.complete_chapter_async(course_id, chapter_id, user)


@router.delete("/{chapter_id}/progress", status_code=status.HTTP_204_NO_CONTENT)
async def uncomplete_chapter(
    course_id: uuid.UUID,
    chapter_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    learning_service: LearningService = Depends(LearningService),
):
    user = await authorization.get_current_user()
    await learning_service.uncomplete_chapter_async(course_id, chapter_id, user)


# ==============================
# 📝 HOMEWORK
# ==============================


@router.get("/{chapter_id}/homework")
async def get_homework(
    course_id: uuid.UUID,
    chapter_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    learning_service: LearningService = Depends(LearningService),
):
    user = await authorization.get_current_user()
    return await learning_service.get_homework_async(course_id, chapter_id, user)


@router.post("/{chapter_id}/homework")
async def submit_homework(
    course_id: uuid.UUID,
    chapter_id: uuid.UUID,
    schema: SubmitImage = Body(...),
    authorization: AuthorizationService = Depends(AuthorizationService),
    learning_service: LearningService = Depends(LearningService),
):
    user = await authorization.get_current_user()
    return await learning_service.submit_homework_async(course_id, chapter_id, schema, user)


# ==============================
# 🧩 ACTIVITIES
# ==============================


@router.get("/{chapter_id}/activities")
async def list_activities(
    course_id: uuid.UUID,
    chapter_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    learning_service: LearningService = Depends(LearningService),
):
    user = await authorization.get_current_user()
    return await learning_service.list_activities_async(course_id, chapter_id, user)


@router.get("/{chapter_id}/activities/{activity_id}/submission")
async def get_activity_submission(
    course_id: uuid.UUID,
    chapter_id: uuid.UUID,
    activity_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    learning_service: LearningService = Depends(LearningService),
):
    user = await authorization.get_current_user()
    return await learning_service.get_activity_submission_async(course_id, chapter_id, activity_id, user)


@router.post("/{chapter_id}/activities/{activity_id}/submission")
async def submit_activity(
    course_id: uuid.UUID,
    chapter_id: uuid.UUID,
    activity_id: uuid.UUID,
    schema: SubmitImage = Body(...),
    authorization: AuthorizationService = Depends(AuthorizationService),
    learning_service: LearningService = Depends(LearningService),
):
    user = await authorization.get_current_user()
    return await learning_service.submit_activity_async(course_id, chapter_id, activity_id, schema, user)
