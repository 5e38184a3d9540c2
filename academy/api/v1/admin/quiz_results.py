import uuid

from fastapi import APIRouter, Depends, Query

from academy.core.deps import AuthorizationService
from academy.core.enum import STAFF_ROLES
from academy.services.admin.quiz_result import QuizResultService

router = APIRouter(prefix="/admin/quiz-results", tags=["ADMIN QUIZ RESULTS"])


@router.get("")
async def list_quiz_results(
    course_id: uuid.UUID | None = Query(None),
    authorization: AuthorizationService = Depends(AuthorizationService),
    result_service: QuizResultService = Depends(QuizResultService),
):
    await authorization.require_role(STAFF_ROLES)
    return await result_service.list_results_async(course_id)
