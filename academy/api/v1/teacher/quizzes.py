import uuid

from fastapi import APIRouter, Body, Depends, status

from academy.core.deps import AuthorizationService
from academy.core.enum import AUTHOR_ROLES
from academy.schemas.teacher.course import PublishSchema
from academy.schemas.teacher.quiz import CreateQuiz, UpdateQuiz
from academy.services.teacher.quiz import TeacherQuizService

router = APIRouter(prefix="/teacher", tags=["Teacher Quizzes"])


@router.post("/courses/{course_id}/quizzes", status_code=status.HTTP_201_CREATED)
async def create_quiz(
    course_id: uuid.UUID,
    schema: CreateQuiz = Body(...),
    authorization: AuthorizationService = Depends(AuthorizationService),
    quiz_service: TeacherQuizService = Depends(TeacherQuizService),
):
    user = await authorization.require_role(AUTHOR_ROLES)
    return await quiz_service.create_quiz_async(course_id, schema, user)


@router.get("/quizzes/{quiz_id}")
async def get_quiz(
    quiz_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    quiz_service: TeacherQuizService = Depends(TeacherQuizService),
):
    user = await authorization.require_role(AUTHOR_ROLES)
    return await quiz_service.get_quiz_async(quiz_id, user)


@router.patch("/quizzes/{quiz_id}")
async def update_quiz(
    quiz_id: uuid.UUID,
    schema: UpdateQuiz = Body(...),
    authorization: AuthorizationService = Depends(AuthorizationService),
    quiz_service: TeacherQuizService = Depends(TeacherQuizService),
):
    user = await authorization.require_role(AUTHOR_ROLES)
    return await quiz_service.update_quiz_async(quiz_id, schema, user)


@router.delete("/quizzes/{quiz_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_quiz(
    quiz_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    quiz_service: TeacherQuizService = Depends(TeacherQuizService),
):
    user = await authorization.require_role(AUTHOR_ROLES)
    await quiz_service.delete_quiz_async(quiz_id, user)


@router.patch("/quizzes/{quiz_id}/publish")
async def publish_quiz(
    quiz_id: uuid.UUID,
    schema: PublishSchema = Body(...),
    authorization: AuthorizationService = Depends(AuthorizationService),
    quiz_service: TeacherQuizService = Depends(TeacherQuizService),
):
    user = await authorization.require_role(AUTHOR_ROLES)
    return await quiz_service.publish_quiz_async(quiz_id, schema, user)
