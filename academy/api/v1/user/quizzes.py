import uuid

from fastapi import APIRouter, Body, Depends

from academy.core.deps import AuthorizationService
from academy.schemas.user.learning import SubmitQuiz
from academy.services.user.quizzes import QuizService

router = APIRouter(prefix="/courses/{course_id}/quizzes", tags=["User Quizzes"])


@router.get("/{quiz_id}")
async def get_quiz(
    course_id: uuid.UUID,
    quiz_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    quiz_service: QuizService = Depends(QuizService),
):
    user = await authorization.get_current_user()
    return await quiz_service.get_quiz_async(course_id, quiz_id, user)


@router.get("/{quiz_id}/info")
async def get_quiz_info(
    course_id: uuid.UUID,
    quiz_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    quiz_service: QuizService = Depends(QuizService),
):
    user = await authorization.get_current_user()
    return await quiz_service.get_quiz_info_async(course_id, quiz_id, user)


@router.post("/{quiz_id}/result")
async def submit_quiz(
    course_id: uuid.UUID,
    quiz_id: uuid.UUID,
    schema: SubmitQuiz = Body(...),
    authorization: AuthorizationService = Depends(AuthorizationService),
    quiz_service: QuizService = Depends(QuizService),
):
    user = await authorization.get_current_user()
    return await quiz_service.submit_result_async(course_id, quiz_id, schema.answers, user)


@router.get("/{quiz_id}/result")
async def get_latest_result(
    course_id: uuid.UUID,
    quiz_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    quiz_service: QuizService = Depends(QuizService),
):
    user = await authorization.get_current_user()
    return await quiz_service.get_latest_result_async(course_id, quiz_id, user)
