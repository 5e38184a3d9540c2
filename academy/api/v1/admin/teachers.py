from fastapi import APIRouter, Depends

from academy.core.deps import AuthorizationService
from academy.core.enum import STAFF_ROLES
from academy.services.admin.teacher import TeacherOverviewService

router = APIRouter(prefix="/admin/teachers", tags=["ADMIN TEACHERS"])


@router.get("")
async def get_teachers(
    authorization: AuthorizationService = Depends(AuthorizationService),
    teacher_service: TeacherOverviewService = Depends(TeacherOverviewService),
):
    await authorization.require_role(STAFF_ROLES)
    return await teacher_service.get_teachers_async()
